from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import func, update

from app.buisness.core.errors import NotFoundError
from app.buisness.core.unit_of_work import parse_identifier
from app.buisness.requests.state_machine import AssignmentStateMachine
from app.data.assignments.assigned_asset import AssignedAsset
from app.logger import get_logger

logger = get_logger("assetverse.domain.assignments")


class AssignmentLedger:
    """Records of units held by employees; created on approval, closed on return"""

    def __init__(self, session):
        self.session = session

    def assign(self, asset_request, hr_user) -> AssignedAsset:
        """Stage an 'assigned' record for an approved request"""
        assignment = AssignedAsset(
            asset_id=asset_request.asset_id,
            request_id=asset_request.id,
            asset_name=asset_request.asset_name,
            asset_image=asset_request.asset_image,
            asset_type=asset_request.asset_type,
            employee_email=asset_request.requester_email,
            employee_name=asset_request.requester_name,
            hr_email=hr_user.email,
            company_name=hr_user.company_name,
            assignment_date=datetime.utcnow(),
            status=AssignmentStateMachine.ASSIGNED,
        )
        self.session.add(assignment)
        self.session.flush()
        return assignment

    def get_owned(self, assignment_id, employee_email: str) -> AssignedAsset:
        """
        Raises:
            NotFoundError: assignment missing or held by someone else
        """
        assignment_id = parse_identifier(assignment_id, 'assignment ID')
        assignment = self.session.get(AssignedAsset, assignment_id)
        if assignment is None or assignment.employee_email != employee_email:
            raise NotFoundError("Assignment not found")
        return assignment

    def mark_returned(self, assignment_id: int) -> bool:
        """
        Close an assignment if it is still 'assigned'.

        Returns:
            bool: False when another writer already closed it
        """
        result = self.session.execute(
            update(AssignedAsset)
            .where(
                AssignedAsset.id == assignment_id,
                AssignedAsset.status == AssignmentStateMachine.ASSIGNED,
            )
            .values(status=AssignmentStateMachine.RETURNED, return_date=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, AssignedAsset) and obj.id == assignment_id:
                self.session.expire(obj)
        return result.rowcount == 1

    def list_for_employee(self, employee_email: str, search: str | None = None,
                          asset_type: str | None = None) -> List[AssignedAsset]:
        query = self.session.query(AssignedAsset).filter(
            AssignedAsset.employee_email == employee_email,
            AssignedAsset.status == AssignmentStateMachine.ASSIGNED,
        )
        if search and search.strip():
            query = query.filter(AssignedAsset.asset_name.ilike(f"%{search.strip()}%"))
        if asset_type and asset_type != 'all':
            query = query.filter(AssignedAsset.asset_type == asset_type)
        return query.order_by(AssignedAsset.assignment_date.desc(), AssignedAsset.id.desc()).all()

    def count_outstanding(self, employee_email: str, hr_email: str) -> int:
        return self.session.query(func.count(AssignedAsset.id)).filter(
            AssignedAsset.employee_email == employee_email,
            AssignedAsset.hr_email == hr_email,
            AssignedAsset.status == AssignmentStateMachine.ASSIGNED,
        ).scalar()

    def outstanding_for_asset(self, asset_id: int, asset_type: str | None = None) -> int:
        """Units of an asset still held, optionally only those issued as asset_type"""
        query = self.session.query(func.count(AssignedAsset.id)).filter(
            AssignedAsset.asset_id == asset_id,
            AssignedAsset.status == AssignmentStateMachine.ASSIGNED,
        )
        if asset_type:
            query = query.filter(AssignedAsset.asset_type == asset_type)
        return query.scalar()
