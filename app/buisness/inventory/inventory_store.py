"""
InventoryStore - stock counters of production houses

Responsibilities:
- Point-in-time read of a house's counters
- Sufficiency check for a requested withdrawal
- Atomic relative adjustment of many counters in one statement, with a
  per-counter "only if enough stock" guard on every decrement

All methods run on the application session and never commit; the caller's
unit of work decides whether the change becomes visible.
"""

from collections.abc import Mapping
from typing import Dict, Iterator

from sqlalchemy import update
from sqlalchemy.orm.util import identity_key

from app import db
from app.data.inventory.materials import MATERIAL_KINDS, MAX_QUANTITY
from app.data.inventory.production_house import ProductionHouse
from app.buisness.core.errors import (
    InsufficientStockError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from app.logger import get_logger

logger = get_logger("ledger.inventory.store")


class InventorySnapshot(Mapping):
    """Immutable view of one production house's counters, keyed by material kind"""

    def __init__(self, source_id: int, quantities: Dict[str, int]):
        self.source_id = source_id
        self._quantities = {kind: int(quantities.get(kind, 0)) for kind in MATERIAL_KINDS}

    def __getitem__(self, kind: str) -> int:
        return self._quantities[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(self._quantities)

    def __len__(self) -> int:
        return len(self._quantities)

    def __repr__(self):
        non_zero = {k: v for k, v in self._quantities.items() if v}
        return f'<InventorySnapshot source={self.source_id} {non_zero}>'

    def to_dict(self) -> Dict[str, int]:
        return dict(self._quantities)


class InventoryStore:
    """Reads and adjusts production house stock"""

    @staticmethod
    def normalize(quantities, allow_negative=False) -> Dict[str, int]:
        """
        Validate a {kind: amount} mapping and drop zero amounts.

        Raises:
            ValidationError: unknown material kind, non-integer amount, an
                amount beyond MAX_QUANTITY, or a negative amount where only
                withdrawals/requests are expected
        """
        unknown = [kind for kind in quantities if kind not in MATERIAL_KINDS]
        if unknown:
            raise ValidationError(
                f"Unknown material kind(s): {', '.join(sorted(unknown))}.",
                fields=unknown,
            )

        normalized = {}
        for kind in MATERIAL_KINDS:
            if kind not in quantities:
                continue
            amount = quantities[kind]
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise ValidationError(
                    f"Quantity for {kind} must be an integer, got {amount!r}.",
                    fields=[kind],
                )
            if amount < 0 and not allow_negative:
                raise ValidationError(
                    f"Quantity for {kind} must not be negative, got {amount}.",
                    fields=[kind],
                )
            if abs(amount) > MAX_QUANTITY:
                raise ValidationError(
                    f"Quantity for {kind} exceeds the maximum of {MAX_QUANTITY}, got {amount}.",
                    fields=[kind],
                )
            if amount != 0:
                normalized[kind] = amount
        return normalized

    def read(self, source_id, lock=False) -> InventorySnapshot:
        """
        Current counters of a production house.

        Args:
            source_id: ProductionHouse id
            lock: take a row lock (SELECT ... FOR UPDATE) where the backend supports it

        Raises:
            NotFoundError: no such production house
        """
        house = db.session.get(
            ProductionHouse,
            source_id,
            populate_existing=True,
            with_for_update=lock or None,
        )
        if house is None:
            raise NotFoundError('ProductionHouse', source_id)
        return InventorySnapshot(house.id, house.material_quantities())

    def validate_sufficiency(self, source_id, requested) -> InventorySnapshot:
        """
        Check that the house holds at least the requested amount of every kind.

        Kinds are checked in MATERIAL_KINDS order and the first shortfall is
        raised, so the error for a given request and stock level is always the
        same.

        Returns:
            The snapshot the check was made against

        Raises:
            InsufficientStockError: first kind whose stock is below the request
            NotFoundError: no such production house
        """
        wanted = self.normalize(requested)
        snapshot = self.read(source_id, lock=True)

        for kind in MATERIAL_KINDS:
            amount = wanted.get(kind, 0)
            if amount > 0 and amount > snapshot[kind]:
                logger.debug(
                    f"Insufficient {kind} at production house {source_id}: "
                    f"requested {amount}, available {snapshot[kind]}"
                )
                raise InsufficientStockError(kind, amount, snapshot[kind])

        return snapshot

    def apply_delta(self, source_id, deltas) -> Dict[str, int]:
        """
        Add each signed delta to its counter in a single UPDATE.

        Every negative delta is guarded in the WHERE clause (counter >= amount),
        so the statement matches no row if any counter would go negative. That
        covers the window between validate_sufficiency and this call when
        another transaction takes the same stock.

        Returns:
            The applied non-zero deltas

        Raises:
            InvariantViolationError: a counter would have gone below zero
            NotFoundError: no such production house
        """
        changes = self.normalize(deltas, allow_negative=True)
        if not changes:
            logger.debug(f"No inventory change for production house {source_id}")
            return changes

        values = {}
        stmt = update(ProductionHouse).where(ProductionHouse.id == source_id)
        for kind, delta in changes.items():
            column = getattr(ProductionHouse, kind)
            values[kind] = column + delta
            if delta < 0:
                stmt = stmt.where(column >= -delta)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        result = db.session.execute(stmt)
        if result.rowcount == 0:
            if db.session.get(ProductionHouse, source_id) is None:
                raise NotFoundError('ProductionHouse', source_id)
            raise InvariantViolationError(
                f"Stock at production house {source_id} changed while the transaction "
                f"was being processed; the adjustment would make a counter negative.",
                source_id=source_id,
            )

        # Loaded instances still hold the pre-update values
        instance = db.session.identity_map.get(identity_key(ProductionHouse, source_id))
        if instance is not None:
            db.session.expire(instance)

        logger.debug(f"Applied inventory delta to production house {source_id}: {changes}")
        return changes
