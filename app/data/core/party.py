from app import db
from app.data.core.record_base import RecordBase


class Party(RecordBase):
    """Customer party that owns one or more factories"""
    __tablename__ = 'parties'

    name = db.Column(db.String(200), nullable=False)

    factories = db.relationship('Factory', back_populates='party', lazy='select')

    def __repr__(self):
        return f'<Party {self.id}: {self.name}>'
