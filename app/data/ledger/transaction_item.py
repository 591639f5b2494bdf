from app import db


class TransactionItem(db.Model):
    """Pallet line item: a pallet size label and how many moved"""
    __tablename__ = 'transaction_items'

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey('transaction_records.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    pallet_size = db.Column(db.String(50), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_transaction_items_quantity_positive'),
    )

    transaction = db.relationship('TransactionRecord', back_populates='items')

    def __repr__(self):
        return f'<TransactionItem {self.pallet_size} x{self.quantity}>'

    def to_dict(self):
        return {
            'pallet_size': self.pallet_size,
            'quantity': self.quantity,
        }
