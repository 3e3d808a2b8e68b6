"""
Asset Request Service
Presentation service for request lists seen by HR managers and employees.
"""

from typing import List, Optional

from flask_sqlalchemy.pagination import Pagination

from app import db
from app.buisness.core.errors import InvalidInputError
from app.buisness.requests.state_machine import RequestStateMachine
from app.data.requests.asset_request import AssetRequest


class RequestService:
    """
    Service for asset request presentation data.

    Provides methods for:
    - The HR's incoming request queue (filtered by status, paginated)
    - An employee's own request history
    """

    @staticmethod
    def build_hr_query(hr_email: str, status: Optional[str] = None):
        """
        Build the HR request query, newest first.

        Args:
            hr_email: HR owning the requests
            status: One of the request statuses; None or 'all' disables the filter
        """
        query = db.session.query(AssetRequest).filter(AssetRequest.hr_email == hr_email)

        if status and status != 'all':
            if status not in RequestStateMachine.STATUSES:
                raise InvalidInputError(
                    f"Status must be 'all' or one of: {', '.join(RequestStateMachine.STATUSES)}"
                )
            query = query.filter(AssetRequest.request_status == status)

        return query.order_by(AssetRequest.request_date.desc(), AssetRequest.id.desc())

    @staticmethod
    def hr_requests(hr_email: str, status: Optional[str] = None, page: int = 1, limit: int = 10) -> Pagination:
        return RequestService.build_hr_query(hr_email, status).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def my_requests(email: str) -> List[AssetRequest]:
        return db.session.query(AssetRequest).filter(
            AssetRequest.requester_email == email,
        ).order_by(AssetRequest.request_date.desc(), AssetRequest.id.desc()).all()
