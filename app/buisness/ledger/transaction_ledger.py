"""
TransactionLedger - business logic for orders and bills

Responsibilities:
- Create a transaction: validate stock, number it, persist it and deduct the
  stock, all in one unit of work
- Soft-delete a transaction and put back exactly the stock it took
- Edit the few fields that do not affect stock (vehicle, vehicle number, date)

Stock only moves for orders drawn from a production house. Bills and orders
from associate companies are recorded without touching any counter.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from flask import current_app, has_app_context
from sqlalchemy import update

from app import db
from app.data.core.sequences.sequence_generator import SequenceGenerator
from app.data.ledger.kinds import TransactionKind
from app.data.ledger.transaction_record import TransactionRecord
from app.buisness.core.entity_directory import EntityDirectory
from app.buisness.core.errors import AlreadyDeletedError, NotFoundError, ValidationError
from app.buisness.core.unit_of_work import UnitOfWork
from app.buisness.inventory.inventory_store import InventoryStore
from app.buisness.ledger.source_ref import make_source_ref
from app.buisness.ledger.transaction_draft import parse_date, TransactionDraft
from app.logger import get_logger

logger = get_logger("ledger.ledger")

DEFAULT_PAD_WIDTH = 4

EDITABLE_FIELDS = ('vehicle', 'vehicle_number', 'date')


class LedgerState(Enum):
    DRAFT = 'Draft'
    VALIDATED = 'Validated'
    SEQUENCED = 'Sequenced'
    PERSISTED = 'Persisted'
    INVENTORY_APPLIED = 'InventoryApplied'
    COMMITTED = 'Committed'
    ABORTED = 'Aborted'


_CREATE_ORDER = (
    LedgerState.DRAFT,
    LedgerState.VALIDATED,
    LedgerState.SEQUENCED,
    LedgerState.PERSISTED,
    LedgerState.INVENTORY_APPLIED,
    LedgerState.COMMITTED,
)


class CreateWorkflow:
    """
    Tracks one creation attempt through its states.

    Only forward moves to the next state or a move to ABORTED are allowed;
    anything else is a programming error.
    """

    def __init__(self, draft: TransactionDraft):
        self.draft = draft
        self.state = LedgerState.DRAFT
        self.history = [LedgerState.DRAFT]
        self.custom_transaction_id: Optional[str] = None

    def advance(self, state: LedgerState):
        expected = _CREATE_ORDER[_CREATE_ORDER.index(self.state) + 1] if self.state in _CREATE_ORDER[:-1] else None
        if state is not expected:
            raise RuntimeError(f"Illegal ledger transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)
        logger.debug(f"{self.draft.kind.value} {self.custom_transaction_id or '(unnumbered)'}: {state.value}")

    def abort(self, error: Exception):
        if self.state in (LedgerState.COMMITTED, LedgerState.ABORTED):
            return
        failed_after = self.state
        self.state = LedgerState.ABORTED
        self.history.append(LedgerState.ABORTED)
        # Callers can see how far the attempt got
        setattr(error, 'aborted_after', failed_after)
        logger.debug(f"{self.draft.kind.value} aborted after {failed_after.value}: {error}")


def format_transaction_id(kind: TransactionKind, number: int, pad_width: int = DEFAULT_PAD_WIDTH) -> str:
    """ORD-0001 / BILL-0001; numbers wider than pad_width are not truncated"""
    return f"{kind.id_prefix}-{number:0{pad_width}d}"


class TransactionLedger:
    """Create, soft-delete and edit ledger transactions"""

    def __init__(
        self,
        inventory: InventoryStore = None,
        sequences=SequenceGenerator,
        directory=EntityDirectory,
        pad_width: int = None,
    ):
        self.inventory = inventory if inventory is not None else InventoryStore()
        self.sequences = sequences
        self.directory = directory
        self._pad_width = pad_width

    @property
    def pad_width(self) -> int:
        if self._pad_width is not None:
            return self._pad_width
        if has_app_context():
            return current_app.config.get('TRANSACTION_ID_PAD_WIDTH', DEFAULT_PAD_WIDTH)
        return DEFAULT_PAD_WIDTH

    # =========================================================================
    # CREATE
    # =========================================================================

    def create_transaction(self, payload: Mapping[str, Any], retries: int = 0) -> TransactionRecord:
        """
        Record an order or a bill.

        Args:
            payload: transaction fields, see TransactionDraft
            retries: extra attempts after a retryable failure (lost stock race,
                storage error); each attempt re-validates stock

        Returns:
            The committed TransactionRecord with its custom_transaction_id

        Raises:
            ValidationError: missing/invalid field, nothing written
            NotFoundError: source, party or factory does not exist
            InsufficientStockError: the production house lacks a material
            InvariantViolationError: stock was taken concurrently
            StorageError: the database failed; nothing was written
        """
        # Draft problems are reported before any database work starts
        draft = TransactionDraft.from_payload(payload)
        workflow: Optional[CreateWorkflow] = None

        def work(uow):
            nonlocal workflow
            workflow = CreateWorkflow(draft)
            try:
                return self._create(uow, workflow)
            except Exception as e:
                workflow.abort(e)
                raise

        try:
            record = UnitOfWork.run(work, name="create_transaction", retries=retries)
        except Exception as e:
            if workflow is not None:
                workflow.abort(e)
            raise

        workflow.advance(LedgerState.COMMITTED)
        logger.info(
            f"Committed {draft.kind.value} {record.custom_transaction_id} "
            f"from {draft.source.kind.value} {draft.source.id}"
        )
        return record

    def _create(self, uow: UnitOfWork, workflow: CreateWorkflow) -> TransactionRecord:
        draft = workflow.draft

        self.directory.find_party(draft.party_id)
        self.directory.find_factory(draft.factory_id)
        self.directory.find_source(draft.source)
        withdrawal = draft.positive_quantities()
        if draft.affects_inventory:
            self.inventory.validate_sufficiency(draft.source.id, withdrawal)
        workflow.advance(LedgerState.VALIDATED)

        number = self.sequences.next_value(draft.kind.counter_name)
        workflow.custom_transaction_id = format_transaction_id(draft.kind, number, self.pad_width)
        workflow.advance(LedgerState.SEQUENCED)

        record = draft.build_record(workflow.custom_transaction_id)
        db.session.add(record)
        uow.flush()
        workflow.advance(LedgerState.PERSISTED)

        if draft.affects_inventory:
            self.inventory.apply_delta(
                draft.source.id,
                {kind: -amount for kind, amount in withdrawal.items()},
            )
        workflow.advance(LedgerState.INVENTORY_APPLIED)

        return record

    # =========================================================================
    # SOFT DELETE
    # =========================================================================

    def delete_transaction(self, record_id, retries: int = 0) -> TransactionRecord:
        """
        Soft-delete a transaction and restore the stock it took.

        The restored amounts are the quantities stored on the record, not
        recomputed from anything else.

        Raises:
            NotFoundError: no such record (or its production house is gone)
            AlreadyDeletedError: the record is already disabled; no stock moves
            StorageError: the database failed; record and stock unchanged
        """
        def work(uow):
            return self._delete(uow, record_id)

        record = UnitOfWork.run(work, name="delete_transaction", retries=retries)
        logger.info(f"Deleted {record.transaction_kind} {record.custom_transaction_id}")
        return record

    def _delete(self, uow: UnitOfWork, record_id) -> TransactionRecord:
        record = db.session.get(TransactionRecord, record_id, populate_existing=True)
        if record is None:
            raise NotFoundError('Transaction', record_id)
        if record.disabled:
            raise AlreadyDeletedError(record.custom_transaction_id)

        # Conditional flip so two concurrent deletes cannot both restore stock
        claimed = db.session.execute(
            update(TransactionRecord)
            .where(TransactionRecord.id == record.id)
            .where(TransactionRecord.disabled.is_(False))
            .values(disabled=True)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            raise AlreadyDeletedError(record.custom_transaction_id)
        db.session.expire(record)

        if record.affects_inventory:
            source = make_source_ref(record.source_kind, record.source_id)
            self.directory.find_source(source)
            restored = {
                kind: amount
                for kind, amount in record.material_quantities().items()
                if amount > 0
            }
            self.inventory.apply_delta(source.id, restored)
            logger.debug(f"Restored {restored} to production house {source.id}")

        uow.flush()
        return record

    # =========================================================================
    # EDIT
    # =========================================================================

    def edit_transaction(self, record_id, updates: Mapping[str, Any]) -> TransactionRecord:
        """
        Change vehicle, vehicle_number or date of an active transaction.

        Quantities, source, party and factory cannot be edited; changing them
        would need the same validate/apply machinery as creation. Such keys are
        rejected rather than ignored.

        Raises:
            ValidationError: a key outside the allow-list, or an empty value
            NotFoundError: no such record
            AlreadyDeletedError: the record is disabled
        """
        rejected = sorted(key for key in updates if key not in EDITABLE_FIELDS)
        if rejected:
            raise ValidationError(
                f"Field(s) cannot be edited after creation: {', '.join(rejected)}.",
                fields=rejected,
            )

        changes = {}
        empty = []
        for key in EDITABLE_FIELDS:
            if key not in updates:
                continue
            value = updates[key]
            if value is None or (isinstance(value, str) and not value.strip()):
                empty.append(key)
            elif key == 'date':
                changes[key] = parse_date(value)
            else:
                changes[key] = str(value).strip()
        if empty:
            raise ValidationError(f"Field(s) must not be empty: {', '.join(empty)}.", fields=empty)

        def work(uow):
            record = db.session.get(TransactionRecord, record_id, populate_existing=True)
            if record is None:
                raise NotFoundError('Transaction', record_id)
            if record.disabled:
                raise AlreadyDeletedError(record.custom_transaction_id)
            for key, value in changes.items():
                setattr(record, key, value)
            uow.flush()
            return record

        record = UnitOfWork.run(work, name="edit_transaction")
        if changes:
            logger.info(f"Edited {record.custom_transaction_id}: {', '.join(sorted(changes))}")
        return record
