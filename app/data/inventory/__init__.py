"""
Inventory models

- materials - the closed set of material kinds and the shared counter columns
- production_house - the stock-holding source and its counters
"""

from app.data.inventory.materials import MATERIAL_KINDS, MaterialQuantitiesMixin
from app.data.inventory.production_house import ProductionHouse

__all__ = [
    'MATERIAL_KINDS',
    'MaterialQuantitiesMixin',
    'ProductionHouse',
]
