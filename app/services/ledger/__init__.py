"""
Ledger query services
"""

from app.services.ledger.transaction_query_service import TransactionQueryService

__all__ = ['TransactionQueryService']
