from app import db
from app.data.core.record_base import RecordBase
from app.data.inventory.materials import MATERIAL_KINDS, MaterialQuantitiesMixin


class ProductionHouse(MaterialQuantitiesMixin, RecordBase):
    """
    Stock-holding source.

    The material columns are the house's inventory counters. They are only
    changed through InventoryStore.apply_delta, never assigned directly.
    """
    __tablename__ = 'production_houses'

    name = db.Column(db.String(200), nullable=False)
    username = db.Column(db.String(100), nullable=False, unique=True)
    email = db.Column(db.String(200), nullable=False, unique=True)

    __table_args__ = tuple(
        db.CheckConstraint(f'{kind} >= 0', name=f'ck_production_houses_{kind}_non_negative')
        for kind in MATERIAL_KINDS
    )

    def __repr__(self):
        return f'<ProductionHouse {self.id}: {self.name}>'
