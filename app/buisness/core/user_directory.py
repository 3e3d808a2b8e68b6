"""
User Directory (Core)
Registration, authentication and profile maintenance for HR and employee accounts.

Handles:
- HR registration (company, capacity quota, basic subscription)
- Employee registration
- Credential checks
- Profile updates and capacity changes made by the package flow
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from app.buisness.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
)
from app.buisness.core.unit_of_work import atomic, parse_text
from app.data.core.user_info.password_validator import PasswordValidator
from app.data.core.user_info.user import User
from app.logger import get_logger

logger = get_logger("assetverse.domain.core.user_directory")

DEFAULT_SUBSCRIPTION = 'basic'


class UserDirectory:
    """
    Identity & role directory.

    Args:
        session: SQLAlchemy session
        default_capacity (int): capacity_limit given to new HR accounts
        default_avatar (str): profile image given to new employees
    """

    def __init__(self, session, default_capacity: int = 5, default_avatar: Optional[str] = None):
        self.session = session
        self.default_capacity = default_capacity
        self.default_avatar = default_avatar

    # ========== Registration ==========

    def register_hr(self, name, email, password, company_name, company_logo, date_of_birth) -> User:
        """
        Create an HR account.

        Raises:
            InvalidInputError: missing field, short password or bad date
            ConflictError: email already registered
        """
        if not all([name, email, password, company_name, company_logo, date_of_birth]):
            raise InvalidInputError("All fields are required")

        user = self._new_user(name, email, password, date_of_birth, User.ROLE_HR)
        user.company_name = parse_text(company_name, 'Company name')
        user.company_logo = parse_text(company_logo, 'Company logo')
        user.profile_image = user.company_logo
        user.capacity_limit = self.default_capacity
        user.current_affiliate_count = 0
        user.subscription = DEFAULT_SUBSCRIPTION

        self._insert(user)
        logger.info(f"Registered HR {user.email} for {user.company_name} (capacity {user.capacity_limit})")
        return user

    def register_employee(self, name, email, password, date_of_birth) -> User:
        """
        Create an employee account. Employees join teams through approved requests.

        Raises:
            InvalidInputError: missing field, short password or bad date
            ConflictError: email already registered
        """
        if not all([name, email, password, date_of_birth]):
            raise InvalidInputError("All fields are required")

        user = self._new_user(name, email, password, date_of_birth, User.ROLE_EMPLOYEE)
        user.profile_image = self.default_avatar

        self._insert(user)
        logger.info(f"Registered employee {user.email}")
        return user

    def _new_user(self, name, email, password, date_of_birth, role) -> User:
        name = parse_text(name, 'Name')
        email = parse_text(email, 'Email')
        is_valid, error_message = PasswordValidator.validate(password)
        if not is_valid:
            raise InvalidInputError(error_message)

        email = self.normalize_email(email)
        if self.get_by_email(email) is not None:
            raise ConflictError("User already exists")

        user = User(
            name=name,
            email=email,
            role=role,
            date_of_birth=self.parse_date(date_of_birth),
        )
        user.set_password(password)
        return user

    def _insert(self, user: User) -> None:
        with atomic(self.session, 'register'):
            self.session.add(user)
            try:
                self.session.flush()
            except IntegrityError:
                raise ConflictError("User already exists")

    # ========== Lookup / credentials ==========

    def get_by_email(self, email) -> Optional[User]:
        if not email:
            return None
        return self.session.query(User).filter(User.email == self.normalize_email(email)).first()

    def get_required(self, email) -> User:
        user = self.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def authenticate(self, email, password) -> User:
        """
        Raises:
            InvalidInputError: email or password missing
            InvalidCredentialsError: unknown email or wrong password
        """
        if not email or not password:
            raise InvalidInputError("Email and password are required")
        if not isinstance(email, str) or not isinstance(password, str):
            raise InvalidInputError("Email and password must be text")

        user = self.get_by_email(email)
        if user is None or not user.check_password(password):
            logger.warning(f"Failed login attempt for {email}")
            raise InvalidCredentialsError("Invalid credentials")
        return user

    # ========== Updates ==========

    def update_profile(self, email, name=None, profile_image=None, date_of_birth=None) -> User:
        """Change name, profile image or date of birth; empty values are ignored"""
        user = self.get_required(email)
        with atomic(self.session, 'update_profile'):
            name = parse_text(name, 'Name', required=False)
            if name:
                user.name = name
            profile_image = parse_text(profile_image, 'Profile image', required=False)
            if profile_image:
                user.profile_image = profile_image
            if date_of_birth:
                user.date_of_birth = self.parse_date(date_of_birth)
        logger.info(f"Profile updated for {user.email}")
        return user

    def set_capacity(self, hr_email, capacity_limit, subscription) -> User:
        """
        Stage a new capacity quota for an HR account (caller commits).

        A limit below the current active count is accepted; it only blocks new affiliations.
        """
        user = self.get_required(hr_email)
        if not user.is_hr:
            raise InvalidInputError("Only HR accounts have a capacity limit")
        if isinstance(capacity_limit, bool) or not isinstance(capacity_limit, int) or capacity_limit < 0:
            raise InvalidInputError("Employee limit must be a non-negative integer")

        user.capacity_limit = capacity_limit
        user.subscription = subscription
        self.session.flush()
        logger.info(f"Capacity for {user.email} set to {capacity_limit} ({subscription})")
        return user

    # ========== Helpers ==========

    @staticmethod
    def normalize_email(email) -> str:
        return str(email).strip().lower()

    @staticmethod
    def parse_date(value) -> date:
        """Accept a date, a datetime or an ISO 'YYYY-MM-DD' string (a time part is ignored)"""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d').date()
        except ValueError:
            raise InvalidInputError("Date of birth must be in YYYY-MM-DD format")
