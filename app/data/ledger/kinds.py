"""
Stored enumerations for the ledger tables.
Values are the strings written to the database.
"""

from enum import Enum


class TransactionKind(str, Enum):
    ORDER = 'order'
    BILL = 'bill'

    @property
    def counter_name(self):
        return 'orderId' if self is TransactionKind.ORDER else 'billId'

    @property
    def id_prefix(self):
        return 'ORD' if self is TransactionKind.ORDER else 'BILL'


class SourceKind(str, Enum):
    PRODUCTION_HOUSE = 'ProductionHouse'
    ASSOCIATE_COMPANY = 'AssociateCompany'


class RecordStatus(str, Enum):
    """Lifecycle of a ledger record. Stored as the `disabled` flag."""
    ACTIVE = 'Active'
    DISABLED = 'Disabled'
