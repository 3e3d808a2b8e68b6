"""
Returnability Policy

Only Returnable assets go back into stock.
"""

from app.buisness.core.errors import InvalidOperationError
from app.data.core.asset_info.asset import Asset


class ReturnabilityPolicy:
    """Uses the asset type captured on the assignment when it was created"""

    @classmethod
    def is_returnable(cls, assignment) -> bool:
        return assignment.asset_type == Asset.RETURNABLE

    @classmethod
    def check(cls, assignment) -> None:
        """
        Raises:
            InvalidOperationError: the assigned asset is not returnable
        """
        if not cls.is_returnable(assignment):
            raise InvalidOperationError("This asset is not returnable")
