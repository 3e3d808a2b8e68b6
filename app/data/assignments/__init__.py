"""
Assigned asset records
"""

from .assigned_asset import AssignedAsset
