from __future__ import annotations

from datetime import datetime
from typing import List, Tuple

from sqlalchemy import case, func, update
from sqlalchemy.exc import IntegrityError

from app.buisness.core.errors import ConflictError, NotFoundError, QuotaExceededError
from app.data.affiliations.employee_affiliation import EmployeeAffiliation
from app.data.core.user_info.user import User
from app.logger import get_logger

logger = get_logger("assetverse.domain.affiliations")


class AffiliationLedger:
    """
    Employee/HR affiliations and the per-HR capacity quota.

    Invariants:
    - at most one active affiliation per (employee, HR) pair (partial unique index)
    - active_count(hr) <= capacity_limit after any ensure_affiliation()

    The quota is read from the HR row on every check, so a capacity change made
    by the payment flow applies to the next approval.
    """

    def __init__(self, session):
        self.session = session

    def _active(self, employee_email: str, hr_email: str):
        return self.session.query(EmployeeAffiliation).filter(
            EmployeeAffiliation.employee_email == employee_email,
            EmployeeAffiliation.hr_email == hr_email,
            EmployeeAffiliation.status == EmployeeAffiliation.ACTIVE,
        )

    def is_active(self, employee_email: str, hr_email: str) -> bool:
        return self.session.query(self._active(employee_email, hr_email).exists()).scalar()

    def active_count(self, hr_email: str) -> int:
        return self.session.query(func.count(EmployeeAffiliation.id)).filter(
            EmployeeAffiliation.hr_email == hr_email,
            EmployeeAffiliation.status == EmployeeAffiliation.ACTIVE,
        ).scalar()

    def ensure_affiliation(self, employee_email: str, hr_user: User,
                           employee_name: str | None = None) -> Tuple[EmployeeAffiliation, bool]:
        """
        Make sure employee_email is an active member of hr_user's team.

        Args:
            employee_email: Employee joining the team
            hr_user: HR account owning the team (row is re-read for the quota)
            employee_name: Name copied onto the affiliation

        Returns:
            tuple: (affiliation, created)

        Raises:
            QuotaExceededError: the HR already has capacity_limit active members
            ConflictError: a concurrent writer created the same affiliation
        """
        existing = self._active(employee_email, hr_user.email).first()
        if existing is not None:
            return existing, False

        current = self.active_count(hr_user.email)
        self.session.refresh(hr_user, attribute_names=['capacity_limit', 'current_affiliate_count'])
        if current >= hr_user.capacity_limit:
            logger.warning(
                f"Capacity reached for {hr_user.email}: {current}/{hr_user.capacity_limit} active employees"
            )
            raise QuotaExceededError(
                "Employee limit reached. Please upgrade your package.",
                capacity_limit=hr_user.capacity_limit,
                active=current,
            )

        # Conditional increment serializes concurrent approvals competing for the last seat
        claimed = self.session.execute(
            update(User)
            .where(User.id == hr_user.id, User.current_affiliate_count < User.capacity_limit)
            .values(current_affiliate_count=User.current_affiliate_count + 1)
            .execution_options(synchronize_session=False)
        ).rowcount
        if claimed != 1:
            raise QuotaExceededError(
                "Employee limit reached. Please upgrade your package.",
                capacity_limit=hr_user.capacity_limit,
                active=current,
            )

        affiliation = EmployeeAffiliation(
            employee_email=employee_email,
            employee_name=employee_name,
            hr_email=hr_user.email,
            company_name=hr_user.company_name,
            company_logo=hr_user.company_logo,
            affiliation_date=datetime.utcnow(),
            status=EmployeeAffiliation.ACTIVE,
        )
        self.session.add(affiliation)
        try:
            self.session.flush()
        except IntegrityError:
            raise ConflictError("Employee was affiliated by a concurrent operation; retry")
        self.session.expire(hr_user, ['current_affiliate_count'])

        logger.info(f"Affiliated {employee_email} with {hr_user.email} ({current + 1}/{hr_user.capacity_limit})")
        return affiliation, True

    def deactivate(self, employee_email: str, hr_email: str) -> EmployeeAffiliation:
        """
        Remove an employee from the HR's team (the row is kept as inactive history).

        Raises:
            NotFoundError: no active affiliation for the pair
        """
        affiliation = self._active(employee_email, hr_email).first()
        if affiliation is None:
            raise NotFoundError("Employee not found in your team")

        affiliation.status = EmployeeAffiliation.INACTIVE
        affiliation.removed_date = datetime.utcnow()

        self.session.execute(
            update(User)
            .where(User.email == hr_email)
            .values(current_affiliate_count=case(
                (User.current_affiliate_count > 0, User.current_affiliate_count - 1),
                else_=0,
            ))
            .execution_options(synchronize_session=False)
        )
        self.session.flush()
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, User) and obj.email == hr_email:
                self.session.expire(obj, ['current_affiliate_count'])

        logger.info(f"Deactivated affiliation of {employee_email} with {hr_email}")
        return affiliation

    # ========== Read helpers ==========

    def for_employee(self, employee_email: str) -> List[EmployeeAffiliation]:
        return self.session.query(EmployeeAffiliation).filter(
            EmployeeAffiliation.employee_email == employee_email,
            EmployeeAffiliation.status == EmployeeAffiliation.ACTIVE,
        ).order_by(EmployeeAffiliation.affiliation_date.asc()).all()

    def roster(self, hr_email: str, search: str | None = None):
        """Query of the HR's active affiliations, newest first"""
        query = self.session.query(EmployeeAffiliation).filter(
            EmployeeAffiliation.hr_email == hr_email,
            EmployeeAffiliation.status == EmployeeAffiliation.ACTIVE,
        )
        if search and search.strip():
            query = query.filter(EmployeeAffiliation.employee_name.ilike(f"%{search.strip()}%"))
        return query.order_by(EmployeeAffiliation.affiliation_date.desc(), EmployeeAffiliation.id.desc())
