"""
Ledger models: orders and bills with their pallet line items
"""

from app.data.ledger.kinds import TransactionKind, SourceKind, RecordStatus
from app.data.ledger.transaction_record import TransactionRecord
from app.data.ledger.transaction_item import TransactionItem

__all__ = [
    'TransactionKind',
    'SourceKind',
    'RecordStatus',
    'TransactionRecord',
    'TransactionItem',
]
