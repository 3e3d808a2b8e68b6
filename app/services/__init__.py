"""
Services Layer
Presentation-specific services and data getters used primarily in routes.

Services should:
- Not modify core data models or business logic
- Be presentation-focused - used primarily by routes
- Can read from multiple data models to aggregate information
- Be stateless where possible
"""
