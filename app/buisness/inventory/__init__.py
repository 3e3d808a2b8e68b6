"""
Inventory business layer.

Availability bookkeeping (reserve/release) and HR-scoped asset maintenance.
"""

from app.buisness.inventory.inventory_ledger import InventoryLedger

__all__ = ['InventoryLedger']
