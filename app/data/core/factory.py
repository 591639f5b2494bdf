from app import db
from app.data.core.record_base import RecordBase


class Factory(RecordBase):
    """Delivery destination belonging to a party"""
    __tablename__ = 'factories'

    name = db.Column(db.String(200), nullable=False)
    party_id = db.Column(db.Integer, db.ForeignKey('parties.id'), nullable=False)

    party = db.relationship('Party', back_populates='factories')

    def __repr__(self):
        return f'<Factory {self.id}: {self.name} (party {self.party_id})>'
