"""
RequestWorkflow - Domain facade for the asset request lifecycle

Moves a request pending → approved | rejected and approved → returned while
keeping the inventory, affiliation and assignment ledgers consistent.

Every operation is one business transaction (see atomic()). Steps that race
with other writers are applied as conditional updates:
- request status:      UPDATE ... WHERE request_status = <expected>
- asset availability:  UPDATE ... WHERE available_quantity > 0
- HR seat count:       UPDATE ... WHERE current_affiliate_count < capacity_limit
A zero row count aborts the transaction, so approvals against the same
request or the last unit of an asset succeed at most once.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from app.buisness.affiliations.affiliation_ledger import AffiliationLedger
from app.buisness.assignments.assignment_ledger import AssignmentLedger
from app.buisness.core.errors import (
    ConflictError,
    NotFoundError,
    UnavailableError,
)
from app.buisness.core.unit_of_work import atomic, parse_identifier, parse_text
from app.buisness.inventory.inventory_ledger import InventoryLedger
from app.buisness.requests.policies import PendingRequestUniquenessPolicy, ReturnabilityPolicy
from app.buisness.requests.state_machine import RequestStateMachine
from app.data.assignments.assigned_asset import AssignedAsset
from app.data.core.user_info.user import User
from app.data.requests.asset_request import AssetRequest
from app.logger import get_logger

logger = get_logger("assetverse.domain.requests.workflow")


class RequestWorkflow:
    """
    Domain facade for asset requests.

    Holds the session and the three ledgers it coordinates. Ledgers only stage
    changes; this class owns the commit/rollback of each operation.
    """

    def __init__(
        self,
        session,
        inventory: Optional[InventoryLedger] = None,
        affiliations: Optional[AffiliationLedger] = None,
        assignments: Optional[AssignmentLedger] = None,
    ):
        self.session = session
        self.inventory = inventory or InventoryLedger(session)
        self.affiliations = affiliations or AffiliationLedger(session)
        self.assignments = assignments or AssignmentLedger(session)

    # ========== Request Lifecycle Operations ==========

    def create_request(self, requester_email: str, asset_id, note: Optional[str] = None) -> AssetRequest:
        """
        Submit a pending request for one unit of an asset.

        Args:
            requester_email: Authenticated employee
            asset_id: Requested asset
            note: Free text for the HR

        Returns:
            AssetRequest: the committed pending request

        Raises:
            InvalidInputError: missing or malformed asset id, or a note that is not text
            NotFoundError: asset or requester missing
            UnavailableError: no unit currently available
            ConflictError: a pending request for this asset already exists
        """
        asset_id = parse_identifier(asset_id, 'Asset ID')
        note = parse_text(note, 'Note', required=False) or ''

        with atomic(self.session, 'create_request'):
            asset = self.inventory.get_asset(asset_id)
            if asset is None:
                raise NotFoundError("Asset not found")
            if asset.available_quantity <= 0:
                raise UnavailableError("Asset not available")

            requester = self._user(requester_email)
            PendingRequestUniquenessPolicy.check(self.session, requester_email, asset.id)

            asset_request = AssetRequest(
                asset_id=asset.id,
                asset_name=asset.name,
                asset_type=asset.asset_type,
                asset_image=asset.image,
                requester_email=requester_email,
                requester_name=requester.name,
                hr_email=asset.hr_email,
                company_name=asset.company_name,
                request_date=datetime.utcnow(),
                request_status=RequestStateMachine.PENDING,
                note=note,
            )
            self.session.add(asset_request)
            try:
                self.session.flush()
            except IntegrityError:
                raise ConflictError("You already have a pending request for this asset")

        logger.info(f"Request {asset_request.id} created by {requester_email} for asset {asset_id}")
        return asset_request

    def approve_request(self, hr_email: str, request_id) -> AssignedAsset:
        """
        Approve a pending request: affiliate the requester (quota-checked),
        take one unit out of stock and record the assignment.

        Returns:
            AssignedAsset: the assignment created by the approval

        Raises:
            InvalidInputError: malformed request id
            NotFoundError: request missing or owned by another HR
            ConflictError: request is not pending (already processed)
            UnavailableError: asset missing or exhausted; the request stays pending
            QuotaExceededError: the HR's capacity limit is reached; the request stays pending
        """
        request_id = parse_identifier(request_id, 'request ID')

        with atomic(self.session, 'approve_request'):
            asset_request = self._load_owned_request(request_id, hr_email)
            RequestStateMachine.validate_transition(asset_request.request_status, RequestStateMachine.APPROVED)

            # Re-check at approval time: several pending requests may target the last unit
            asset = self.inventory.get_asset(asset_request.asset_id) if asset_request.asset_id else None
            if asset is None or asset.available_quantity <= 0:
                raise UnavailableError("Asset no longer available")

            hr_user = self._user(hr_email)
            self.affiliations.ensure_affiliation(
                asset_request.requester_email,
                hr_user,
                employee_name=asset_request.requester_name,
            )

            self._transition(
                asset_request,
                RequestStateMachine.PENDING,
                RequestStateMachine.APPROVED,
                approval_date=datetime.utcnow(),
                processed_by=hr_email,
            )

            if not self.inventory.reserve(asset.id):
                raise UnavailableError("Asset no longer available")

            assignment = self.assignments.assign(asset_request, hr_user)

        logger.info(
            f"Request {request_id} approved by {hr_email}: assignment {assignment.id} "
            f"for {assignment.employee_email}"
        )
        return assignment

    def reject_request(self, hr_email: str, request_id) -> AssetRequest:
        """
        Reject a pending request. No inventory or affiliation effects.

        Raises:
            InvalidInputError: malformed request id
            NotFoundError: request missing or owned by another HR
            ConflictError: request is not pending
        """
        request_id = parse_identifier(request_id, 'request ID')

        with atomic(self.session, 'reject_request'):
            asset_request = self._load_owned_request(request_id, hr_email)
            RequestStateMachine.validate_transition(asset_request.request_status, RequestStateMachine.REJECTED)
            self._transition(
                asset_request,
                RequestStateMachine.PENDING,
                RequestStateMachine.REJECTED,
                approval_date=datetime.utcnow(),
                processed_by=hr_email,
            )

        logger.info(f"Request {request_id} rejected by {hr_email}")
        return asset_request

    def return_asset(self, employee_email: str, assignment_id) -> AssignedAsset:
        """
        Hand a Returnable unit back: close the assignment, restock one unit and
        mark the originating approved request as returned.

        Raises:
            InvalidInputError: malformed assignment id
            NotFoundError: assignment missing or held by someone else
            ConflictError: assignment already returned
            InvalidOperationError: asset is not returnable (nothing is changed)
        """
        assignment_id = parse_identifier(assignment_id, 'assignment ID')

        with atomic(self.session, 'return_asset'):
            assignment = self.assignments.get_owned(assignment_id, employee_email)
            if assignment.status != AssignedAsset.ASSIGNED:
                raise ConflictError("Asset already returned")
            ReturnabilityPolicy.check(assignment)

            if not self.assignments.mark_returned(assignment.id):
                raise ConflictError("Asset already returned")

            if assignment.asset_id is None or not self.inventory.release(assignment.asset_id):
                logger.warning(
                    f"Assignment {assignment.id} returned without restocking asset {assignment.asset_id}"
                )

            asset_request = self._approved_request_for(assignment)
            if asset_request is not None:
                self._transition(asset_request, RequestStateMachine.APPROVED, RequestStateMachine.RETURNED)
            else:
                logger.warning(f"No approved request found for returned assignment {assignment.id}")

        logger.info(f"Assignment {assignment_id} returned by {employee_email}")
        return assignment

    # ========== Helpers ==========

    def _user(self, email: str) -> User:
        user = self.session.query(User).filter(User.email == email).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _load_owned_request(self, request_id: int, hr_email: str) -> AssetRequest:
        asset_request = self.session.query(AssetRequest).filter(
            AssetRequest.id == request_id,
            AssetRequest.hr_email == hr_email,
        ).first()
        if asset_request is None:
            raise NotFoundError("Request not found")
        return asset_request

    def _approved_request_for(self, assignment: AssignedAsset) -> Optional[AssetRequest]:
        if assignment.request_id is not None:
            linked = self.session.get(AssetRequest, assignment.request_id)
            if linked is not None and linked.request_status == RequestStateMachine.APPROVED:
                return linked
        # Oldest approval first for records without a request link
        return self.session.query(AssetRequest).filter(
            AssetRequest.asset_id == assignment.asset_id,
            AssetRequest.requester_email == assignment.employee_email,
            AssetRequest.request_status == RequestStateMachine.APPROVED,
        ).order_by(AssetRequest.approval_date.asc(), AssetRequest.id.asc()).first()

    def _transition(self, asset_request: AssetRequest, from_status: str, to_status: str, **values) -> None:
        """
        Compare-and-swap the request status.

        Raises:
            ConflictError: the stored status is no longer from_status
        """
        RequestStateMachine.validate_transition(from_status, to_status)
        result = self.session.execute(
            update(AssetRequest)
            .where(AssetRequest.id == asset_request.id, AssetRequest.request_status == from_status)
            .values(request_status=to_status, **values)
            .execution_options(synchronize_session=False)
        )
        self.session.expire(asset_request)
        if result.rowcount != 1:
            raise ConflictError("Request already processed")
