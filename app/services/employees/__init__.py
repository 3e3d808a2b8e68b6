from app.services.employees.team_service import TeamService

__all__ = ['TeamService']
