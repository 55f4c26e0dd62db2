"""
Warehouse inventory ledger.

Models:
- StockRecord (one batch of a product in a warehouse, quantity never below zero)
- InventoryLog (append-only audit of every quantity change)
- InventoryAlert (near-expiry / low-stock flags, deduplicated while unresolved)
"""

from .stock import StockRecord
from .log import InventoryLog
from .alert import InventoryAlert
