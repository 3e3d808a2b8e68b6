"""
Subscription packages and capacity upgrades
"""

from app.buisness.packages.package_manager import PackageManager
from app.buisness.packages.payment_gateway import PaymentGateway, UnconfiguredPaymentGateway

__all__ = [
    'PackageManager',
    'PaymentGateway',
    'UnconfiguredPaymentGateway',
]
