from app.services.requests.request_service import RequestService

__all__ = ['RequestService']
