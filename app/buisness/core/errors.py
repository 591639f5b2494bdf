"""
Ledger error hierarchy

Every failure a caller can see is a LedgerError with a stable `kind`, a
human-readable message and a to_dict() payload. Client faults are not
retryable; InvariantViolationError and StorageError are server faults and
the same request may be retried.
"""

from app.data.inventory.materials import material_label


class LedgerError(Exception):
    """Base class for all ledger failures"""

    kind = 'LedgerError'
    client_fault = True
    retryable = False

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def details(self):
        """Kind-specific fields added to to_dict()"""
        return {}

    def to_dict(self):
        payload = {'error': self.kind, 'message': self.message}
        payload.update(self.details())
        return payload


class ValidationError(LedgerError):
    """Missing or malformed field, unknown transaction kind, disallowed edit"""

    kind = 'ValidationError'

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])

    def details(self):
        return {'fields': self.fields} if self.fields else {}


class NotFoundError(LedgerError):
    """A referenced entity (source, party, factory, record) does not exist"""

    kind = 'NotFoundError'

    def __init__(self, entity, entity_id):
        super().__init__(f"{entity} {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id

    def details(self):
        return {'entity': self.entity, 'id': self.entity_id}


class InsufficientStockError(LedgerError):
    """Requested quantity of a material exceeds what the source holds"""

    kind = 'InsufficientStockError'

    def __init__(self, material, requested, available):
        label = material_label(material)
        super().__init__(
            f"Insufficient stock for {label}: {requested} requested, but only {available} available."
        )
        self.material = material
        self.requested = requested
        self.available = available

    def details(self):
        return {
            'material': self.material,
            'requested': self.requested,
            'available': self.available,
        }


class AlreadyDeletedError(LedgerError):
    """The record was soft-deleted before"""

    kind = 'AlreadyDeletedError'

    def __init__(self, custom_transaction_id):
        super().__init__(f"Transaction {custom_transaction_id} has already been deleted.")
        self.custom_transaction_id = custom_transaction_id

    def details(self):
        return {'custom_transaction_id': self.custom_transaction_id}


class InvariantViolationError(LedgerError):
    """
    A stock adjustment would have driven a counter below zero even though the
    request passed validation; another transaction took the stock first.
    """

    kind = 'InvariantViolationError'
    client_fault = False
    retryable = True

    def __init__(self, message, source_id=None):
        super().__init__(message)
        self.source_id = source_id


class StorageError(LedgerError):
    """The database failed while a unit of work was running"""

    kind = 'StorageError'
    client_fault = False
    retryable = True

    def __init__(self, message="The ledger could not be updated because of a storage failure."):
        super().__init__(message)
