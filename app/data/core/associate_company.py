from app import db
from app.data.core.record_base import RecordBase


class AssociateCompany(RecordBase):
    """
    Non-inventory source of transactions.

    Orders and bills drawn against an associate company never touch stock
    counters; only the ledger entry is written.
    """
    __tablename__ = 'associate_companies'

    name = db.Column(db.String(200), nullable=False, unique=True)

    def __repr__(self):
        return f'<AssociateCompany {self.id}: {self.name}>'
