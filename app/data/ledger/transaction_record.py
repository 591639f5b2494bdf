from app import db
from app.data.core.record_base import RecordBase
from app.data.inventory.materials import MaterialQuantitiesMixin
from app.data.ledger.kinds import TransactionKind, SourceKind, RecordStatus


class TransactionRecord(MaterialQuantitiesMixin, RecordBase):
    """
    Ledger entry for an order (stock drawn out of a source) or a bill.

    The material columns hold the quantities moved by this transaction. For an
    order against a production house they are exactly what was deducted from
    the house, and exactly what a soft delete puts back.

    Core fields are immutable after creation; only vehicle, vehicle_number and
    date may be edited (see TransactionLedger.edit_transaction).
    """
    __tablename__ = 'transaction_records'

    custom_transaction_id = db.Column(db.String(20), nullable=False, unique=True)
    date = db.Column(db.DateTime, nullable=False)
    transaction_kind = db.Column(db.String(10), nullable=False)

    # Polymorphic source reference: kind tag + id
    source_kind = db.Column(db.String(30), nullable=False)
    source_id = db.Column(db.Integer, nullable=False)

    party_id = db.Column(db.Integer, db.ForeignKey('parties.id'), nullable=False)
    factory_id = db.Column(db.Integer, db.ForeignKey('factories.id'), nullable=False)

    vehicle = db.Column(db.String(100), nullable=False)
    vehicle_number = db.Column(db.String(50), nullable=False)

    disabled = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.CheckConstraint(
            "transaction_kind IN ('order', 'bill')",
            name='ck_transaction_records_kind'
        ),
        db.CheckConstraint(
            "source_kind IN ('ProductionHouse', 'AssociateCompany')",
            name='ck_transaction_records_source_kind'
        ),
        db.Index('ix_transaction_records_date', 'date'),
        db.Index('ix_transaction_records_factory_date', 'factory_id', 'date'),
        db.Index('ix_transaction_records_party_date', 'party_id', 'date'),
        db.Index('ix_transaction_records_disabled', 'disabled'),
    )

    # Relationships
    party = db.relationship('Party')
    factory = db.relationship('Factory')
    items = db.relationship(
        'TransactionItem',
        back_populates='transaction',
        order_by='TransactionItem.position',
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f'<TransactionRecord {self.custom_transaction_id} {self.transaction_kind}>'

    # Properties
    @property
    def kind(self) -> TransactionKind:
        return TransactionKind(self.transaction_kind)

    @property
    def source(self) -> SourceKind:
        return SourceKind(self.source_kind)

    @property
    def status(self) -> RecordStatus:
        return RecordStatus.DISABLED if self.disabled else RecordStatus.ACTIVE

    @property
    def is_active(self):
        return self.status is RecordStatus.ACTIVE

    @property
    def affects_inventory(self):
        """Only orders drawn from a production house move stock"""
        return (
            self.kind is TransactionKind.ORDER
            and self.source is SourceKind.PRODUCTION_HOUSE
        )

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['status'] = self.status.value
        result['items'] = [item.to_dict() for item in self.items]
        return result
