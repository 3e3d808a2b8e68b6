"""
Asset request records
"""

from .asset_request import AssetRequest
