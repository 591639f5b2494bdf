"""
Inventory business layer.

Stock counters live on production houses and are only read and adjusted
through InventoryStore.
"""

from app.buisness.inventory.inventory_store import InventoryStore, InventorySnapshot

__all__ = [
    'InventoryStore',
    'InventorySnapshot',
]
