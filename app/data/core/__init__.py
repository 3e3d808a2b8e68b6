"""
Core models package: identity directory and asset inventory records
"""

from .user_info.user import User
from .asset_info.asset import Asset
