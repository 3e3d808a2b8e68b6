"""
Pending Request Uniqueness Policy

A requester may hold at most one pending request per asset.
"""

from app.buisness.core.errors import ConflictError
from app.buisness.requests.state_machine import RequestStateMachine
from app.data.requests.asset_request import AssetRequest


class PendingRequestUniquenessPolicy:
    """
    Checked before a request is created. The partial unique index
    uq_asset_requests_pending backs it up for concurrent submissions.
    """

    @classmethod
    def find_pending(cls, session, requester_email: str, asset_id: int):
        return session.query(AssetRequest).filter(
            AssetRequest.asset_id == asset_id,
            AssetRequest.requester_email == requester_email,
            AssetRequest.request_status == RequestStateMachine.PENDING,
        ).first()

    @classmethod
    def check(cls, session, requester_email: str, asset_id: int) -> None:
        """
        Raises:
            ConflictError: a pending request already exists
        """
        existing = cls.find_pending(session, requester_email, asset_id)
        if existing is not None:
            raise ConflictError(
                "You already have a pending request for this asset",
                request_id=existing.id,
            )
