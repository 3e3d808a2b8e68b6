"""
Subscription packages and payment records
"""

from .package import Package
from .payment import Payment
