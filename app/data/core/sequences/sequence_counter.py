from app import db


class SequenceCounter(db.Model):
    """
    Named monotonically increasing counter.

    One row per counter name ("orderId", "billId"). Rows are created lazily by
    SequenceGenerator on first use, so a missing row means a current value of 0.
    """
    __tablename__ = 'sequence_counters'

    name = db.Column(db.String(50), primary_key=True)
    current_value = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<SequenceCounter {self.name}={self.current_value}>'
