"""
Policy classes for asset request business rules

Policies are composable validation rules that enforce business invariants.
They raise domain exceptions when violations are detected.
"""

from app.buisness.requests.policies.pending_uniqueness import PendingRequestUniquenessPolicy
from app.buisness.requests.policies.returnability import ReturnabilityPolicy

__all__ = [
    'PendingRequestUniquenessPolicy',
    'ReturnabilityPolicy',
]
