"""
Transaction Query Service
Read-only lookup and filtered listing of ledger transactions.
"""

from typing import List, Optional
from datetime import datetime
from app import db
from app.data.ledger.kinds import TransactionKind
from app.data.ledger.transaction_record import TransactionRecord
from app.buisness.core.errors import NotFoundError, ValidationError
from app.buisness.ledger.source_ref import parse_source_filter
from app.buisness.ledger.transaction_draft import parse_date


class TransactionQueryService:
    """
    Service for ledger read queries.

    Provides methods for:
    - Getting one transaction by id (disabled ones included, for audit)
    - Listing active transactions with filters
    """

    @staticmethod
    def get_transaction(record_id: int) -> TransactionRecord:
        record = db.session.get(TransactionRecord, record_id)
        if record is None:
            raise NotFoundError('Transaction', record_id)
        return record

    @staticmethod
    def get_by_custom_id(custom_transaction_id: str) -> TransactionRecord:
        record = TransactionRecord.query.filter_by(custom_transaction_id=custom_transaction_id).first()
        if record is None:
            raise NotFoundError('Transaction', custom_transaction_id)
        return record

    @staticmethod
    def list_transactions(
        transaction_kind: Optional[str] = None,
        party_id: Optional[int] = None,
        factory_id: Optional[int] = None,
        source=None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> List[TransactionRecord]:
        """
        Active transactions matching the filters, newest date first.

        Args:
            transaction_kind: 'order' or 'bill'
            party_id: Filter by party
            factory_id: Filter by factory
            source: A source reference or a "Kind:id" string
            date_from: Inclusive lower bound on the transaction date
            date_to: Inclusive upper bound on the transaction date

        Returns:
            List of TransactionRecord objects
        """
        query = TransactionRecord.query.filter_by(disabled=False)

        if transaction_kind:
            try:
                kind = TransactionKind(str(transaction_kind).lower())
            except ValueError:
                raise ValidationError(
                    f"Invalid transaction kind '{transaction_kind}'. Expected 'order' or 'bill'.",
                    fields=['transaction_kind'],
                )
            query = query.filter_by(transaction_kind=kind.value)

        if party_id:
            query = query.filter_by(party_id=party_id)

        if factory_id:
            query = query.filter_by(factory_id=factory_id)

        if source:
            ref = parse_source_filter(source)
            query = query.filter_by(source_kind=ref.kind.value, source_id=ref.id)

        if date_from:
            query = query.filter(TransactionRecord.date >= parse_date(date_from))

        if date_to:
            query = query.filter(TransactionRecord.date <= parse_date(date_to))

        return query.order_by(TransactionRecord.date.desc(), TransactionRecord.id.desc()).all()
