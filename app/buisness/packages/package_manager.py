"""
PackageManager - subscription packages and paid capacity upgrades

The upgrade is a two-step exchange with the payment processor:
1. start_upgrade() opens a payment intent for the package price
2. confirm_upgrade() checks the intent settled, then raises the HR's
   capacity_limit and records the payment in one transaction

The new limit is read by the affiliation ledger on its next quota check.
"""

from datetime import datetime
from typing import Dict, List

from sqlalchemy.exc import IntegrityError

from app.buisness.core.errors import (
    ConflictError,
    InvalidInputError,
    InvalidOperationError,
    NotFoundError,
)
from app.buisness.core.unit_of_work import atomic, parse_text
from app.buisness.core.user_directory import UserDirectory
from app.data.packages.package import Package
from app.data.packages.payment import Payment
from app.logger import get_logger

logger = get_logger("assetverse.domain.packages")

CURRENCY = 'usd'


class PackageManager:

    def __init__(self, session, gateway, directory: UserDirectory = None):
        self.session = session
        self.gateway = gateway
        self.directory = directory or UserDirectory(session)

    # ========== Catalogue ==========

    def list_packages(self) -> List[Package]:
        return self.session.query(Package).order_by(Package.price.asc(), Package.id.asc()).all()

    def my_package(self, hr_email: str) -> Dict:
        hr_user = self.directory.get_required(hr_email)
        return {
            'package_limit': hr_user.capacity_limit,
            'current_employees': hr_user.current_affiliate_count,
            'subscription': hr_user.subscription,
        }

    def payment_history(self, hr_email: str) -> List[Payment]:
        return self.session.query(Payment).filter(
            Payment.hr_email == hr_email,
        ).order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

    # ========== Upgrade ==========

    def start_upgrade(self, hr_email, amount, package_name, employee_limit) -> Dict[str, str]:
        """
        Open a payment intent for a package.

        Returns:
            dict: {'client_secret', 'payment_intent_id'}

        Raises:
            InvalidInputError: missing or inconsistent package details
            NotFoundError: unknown package
            UnavailableError: no processor configured
        """
        package = self._resolve(package_name, employee_limit, amount)
        amount_cents = int(round(package.price * 100))

        intent = self.gateway.create_intent(
            amount_cents,
            CURRENCY,
            {
                'hr_email': hr_email,
                'package_name': package.name,
                'employee_limit': str(package.employee_limit),
            },
        )
        logger.info(f"Payment intent {intent['id']} opened for {hr_email}: {package.name} ({amount_cents} cents)")
        return {
            'client_secret': intent['client_secret'],
            'payment_intent_id': intent['id'],
        }

    def confirm_upgrade(self, hr_email, payment_intent_id, package_name, employee_limit, amount) -> Payment:
        """
        Apply a paid upgrade.

        Raises:
            InvalidInputError: missing intent id or package details
            NotFoundError: unknown package
            InvalidOperationError: intent not paid
            ConflictError: intent already used for an upgrade
        """
        payment_intent_id = parse_text(payment_intent_id, 'Payment intent ID')
        package = self._resolve(package_name, employee_limit, amount)

        if not self.gateway.is_succeeded(payment_intent_id):
            logger.warning(f"Payment {payment_intent_id} for {hr_email} has not succeeded")
            raise InvalidOperationError("Payment not completed")

        with atomic(self.session, 'confirm_upgrade'):
            if self.session.query(Payment).filter(Payment.transaction_id == payment_intent_id).first():
                raise ConflictError("Payment already processed")

            self.directory.set_capacity(hr_email, package.employee_limit, package.name.lower())
            payment = Payment(
                hr_email=hr_email,
                package_name=package.name,
                employee_limit=package.employee_limit,
                amount=package.price,
                transaction_id=payment_intent_id,
                payment_date=datetime.utcnow(),
                status='completed',
            )
            self.session.add(payment)
            try:
                self.session.flush()
            except IntegrityError:
                raise ConflictError("Payment already processed")

        logger.info(f"{hr_email} upgraded to {package.name} ({package.employee_limit} employees)")
        return payment

    def _resolve(self, package_name, employee_limit, amount) -> Package:
        """Load the package and check the client's limit and amount against it"""
        if not package_name or employee_limit in (None, '') or amount in (None, ''):
            raise InvalidInputError("Package name, employee limit and amount are required")
        package_name = parse_text(package_name, 'Package name')

        package = self.session.query(Package).filter(Package.name == package_name).first()
        if package is None:
            raise NotFoundError("Package not found")

        try:
            limit_matches = int(employee_limit) == package.employee_limit
            amount_matches = abs(float(amount) - package.price) < 0.005
        except (TypeError, ValueError):
            raise InvalidInputError("Employee limit and amount must be numbers")
        if not limit_matches or not amount_matches:
            raise InvalidInputError("Package details do not match the selected package")
        return package
