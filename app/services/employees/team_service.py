"""
Team Service
Presentation service for team rosters, birthdays and the HR employee list.
"""

from datetime import date
from typing import Dict, List, Optional

from app import db
from app.buisness.affiliations.affiliation_ledger import AffiliationLedger
from app.buisness.assignments.assignment_ledger import AssignmentLedger
from app.buisness.core.errors import InvalidInputError
from app.data.affiliations.employee_affiliation import EmployeeAffiliation
from app.data.core.user_info.user import User


class TeamService:
    """
    Service for team presentation data.

    Provides methods for:
    - The companies an employee belongs to and their colleagues
    - Birthdays in the employee's teams for a month
    - The HR's paginated employee list with outstanding asset counts
    """

    @staticmethod
    def _members(hr_email: str, exclude_email: Optional[str] = None) -> List[tuple]:
        """(affiliation, user) pairs for the HR's active members"""
        query = db.session.query(EmployeeAffiliation, User).join(
            User, User.email == EmployeeAffiliation.employee_email
        ).filter(
            EmployeeAffiliation.hr_email == hr_email,
            EmployeeAffiliation.status == EmployeeAffiliation.ACTIVE,
        )
        if exclude_email:
            query = query.filter(EmployeeAffiliation.employee_email != exclude_email)
        return query.order_by(EmployeeAffiliation.affiliation_date.asc(), EmployeeAffiliation.id.asc()).all()

    @staticmethod
    def _member_dict(user: User, affiliation: EmployeeAffiliation) -> Dict:
        member = user.to_dict(include_audit_fields=False)
        member['affiliation_date'] = affiliation.affiliation_date.isoformat() if affiliation.affiliation_date else None
        return member

    @staticmethod
    def my_affiliations(employee_email: str) -> List[EmployeeAffiliation]:
        return AffiliationLedger(db.session).for_employee(employee_email)

    @staticmethod
    def my_team(employee_email: str) -> List[Dict]:
        """
        One entry per company the employee is active in, listing the other active members.

        Returns:
            list: [{'company_name', 'company_logo', 'hr_email', 'team_members': [...]}]
        """
        companies = []
        for affiliation in TeamService.my_affiliations(employee_email):
            members = TeamService._members(affiliation.hr_email, exclude_email=employee_email)
            companies.append({
                'company_name': affiliation.company_name,
                'company_logo': affiliation.company_logo,
                'hr_email': affiliation.hr_email,
                'team_members': [TeamService._member_dict(user, aff) for aff, user in members],
            })
        return companies

    @staticmethod
    def team_birthdays(employee_email: str, month: Optional[int] = None) -> List[Dict]:
        """
        Members of the employee's teams (the employee included) born in `month`.

        Args:
            employee_email: Employee asking
            month: 1-12, defaults to the current month
        """
        if month is None:
            month = date.today().month
        if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
            raise InvalidInputError("Month must be between 1 and 12")

        birthdays = []
        for affiliation in TeamService.my_affiliations(employee_email):
            for _, user in TeamService._members(affiliation.hr_email):
                if user.date_of_birth and user.date_of_birth.month == month:
                    birthdays.append({
                        'name': user.name,
                        'email': user.email,
                        'date_of_birth': user.date_of_birth.isoformat(),
                        'company_name': affiliation.company_name,
                    })
        birthdays.sort(key=lambda b: (b['date_of_birth'][5:], b['name']))
        return birthdays

    @staticmethod
    def hr_employees(hr_email: str, search: Optional[str] = None, page: int = 1, limit: int = 10) -> Dict:
        """
        The HR's active team, newest affiliation first, with each member's outstanding asset count.

        Returns:
            dict: {'employees', 'total_pages', 'current_page', 'total_employees'}
        """
        pagination = AffiliationLedger(db.session).roster(hr_email, search).paginate(
            page=page, per_page=limit, error_out=False
        )
        assignments = AssignmentLedger(db.session)

        employees = []
        for affiliation in pagination.items:
            user = db.session.query(User).filter(User.email == affiliation.employee_email).first()
            if user is None:
                continue
            member = TeamService._member_dict(user, affiliation)
            member['asset_count'] = assignments.count_outstanding(affiliation.employee_email, hr_email)
            employees.append(member)

        return {
            'employees': employees,
            'total_pages': pagination.pages,
            'current_page': page,
            'total_employees': pagination.total,
        }
