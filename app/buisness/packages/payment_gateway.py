"""
Payment processor seam

The package flow only needs two calls from a processor: open a payment intent
and ask whether an intent has settled. Deployments register an implementation
in app.extensions['payment_gateway'].
"""

from abc import ABC, abstractmethod
from typing import Dict

from app.buisness.core.errors import UnavailableError


class PaymentGateway(ABC):
    """Abstract payment processor"""

    @abstractmethod
    def create_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> Dict[str, str]:
        """
        Open a payment intent.

        Returns:
            dict: at least {'id': ..., 'client_secret': ...}
        """

    @abstractmethod
    def is_succeeded(self, payment_intent_id: str) -> bool:
        """Whether the intent has been paid"""


class UnconfiguredPaymentGateway(PaymentGateway):
    """Default gateway when no processor is configured; every call is refused"""

    def create_intent(self, amount_cents, currency, metadata):
        raise UnavailableError("Payment processing is not configured")

    def is_succeeded(self, payment_intent_id):
        raise UnavailableError("Payment processing is not configured")
