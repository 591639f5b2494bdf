"""
Transaction Draft
Turns a caller-supplied payload into a checked, typed candidate record.

Payload keys:
    date, transaction_kind, source_kind, source_id (or source=<SourceRef>),
    party_id, factory_id, vehicle, vehicle_number,
    items=[{pallet_size, quantity}, ...],
    one key per material kind (film_white, patti_role, ...)
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from app.data.inventory.materials import MATERIAL_KINDS, MAX_QUANTITY
from app.data.ledger.kinds import TransactionKind
from app.data.ledger.transaction_record import TransactionRecord
from app.data.ledger.transaction_item import TransactionItem
from app.buisness.core.errors import ValidationError
from app.buisness.ledger.source_ref import (
    AssociateCompanyRef,
    ProductionHouseRef,
    SourceRef,
    make_source_ref,
    parse_id,
)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def coerce_quantity(value) -> int:
    """
    Lenient integer coercion for quantity fields.

    Integers pass through, floats are truncated, strings use their leading
    digits ("12 rolls" -> 12). Anything else, and any negative result, is 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 0
        number = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        number = int(match.group(1))
    else:
        return 0
    return max(number, 0)


def parse_date(value) -> datetime:
    """
    Accept a datetime, a date or an ISO-8601 string.
    Aware datetimes are converted to naive UTC, which is what the table stores.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid date '{value}'.", fields=['date'])
    else:
        raise ValidationError(f"Invalid date {value!r}.", fields=['date'])

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _required_text(payload, key, missing):
    value = payload.get(key)
    if value is None or not str(value).strip():
        missing.append(key)
        return None
    return str(value).strip()


def _required_id(payload, key, missing, invalid):
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        missing.append(key)
        return None
    try:
        return parse_id(value)
    except (TypeError, ValueError):
        invalid.append(key)
        return None


@dataclass
class DraftItem:
    pallet_size: str
    quantity: int


@dataclass
class TransactionDraft:
    """A validated but not yet persisted transaction"""

    date: datetime
    kind: TransactionKind
    source: SourceRef
    party_id: int
    factory_id: int
    vehicle: str
    vehicle_number: str
    items: List[DraftItem] = field(default_factory=list)
    quantities: Dict[str, int] = field(default_factory=dict)

    @property
    def affects_inventory(self) -> bool:
        """Only an order drawn from a production house moves stock"""
        if not isinstance(self.source, (ProductionHouseRef, AssociateCompanyRef)):
            raise TypeError(f"Unsupported source reference: {self.source!r}")
        return self.kind is TransactionKind.ORDER and self.source.holds_inventory

    def positive_quantities(self) -> Dict[str, int]:
        return {kind: amount for kind, amount in self.quantities.items() if amount > 0}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'TransactionDraft':
        """
        Build a draft, reporting every missing or malformed field at once.

        Raises:
            ValidationError: required field missing/invalid, unknown
                transaction kind or source kind, bad line item
        """
        missing = []
        invalid = []

        raw_date = payload.get('date')
        parsed_date: Optional[datetime] = None
        if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
            missing.append('date')
        else:
            try:
                parsed_date = parse_date(raw_date)
            except ValidationError:
                invalid.append('date')

        kind = None
        raw_kind = payload.get('transaction_kind')
        if raw_kind is None or (isinstance(raw_kind, str) and not raw_kind.strip()):
            missing.append('transaction_kind')
        else:
            try:
                kind = TransactionKind(str(raw_kind).strip().lower())
            except ValueError:
                invalid.append('transaction_kind')

        source = payload.get('source')
        if source is None:
            source_kind = payload.get('source_kind')
            source_id = payload.get('source_id')
            if not source_kind:
                missing.append('source_kind')
            if source_id is None or (isinstance(source_id, str) and not source_id.strip()):
                missing.append('source_id')
            if source_kind and 'source_id' not in missing:
                try:
                    source = make_source_ref(source_kind, source_id)
                except ValidationError as e:
                    invalid.extend(e.fields)
        elif not isinstance(source, (ProductionHouseRef, AssociateCompanyRef)):
            invalid.append('source')
            source = None

        party_id = _required_id(payload, 'party_id', missing, invalid)
        factory_id = _required_id(payload, 'factory_id', missing, invalid)
        vehicle = _required_text(payload, 'vehicle', missing)
        vehicle_number = _required_text(payload, 'vehicle_number', missing)

        if missing:
            raise ValidationError(
                f"Missing required field(s): {', '.join(missing)}.",
                fields=missing + invalid,
            )
        if invalid:
            if 'transaction_kind' in invalid:
                raise ValidationError(
                    f"Invalid transaction kind '{raw_kind}'. Expected 'order' or 'bill'.",
                    fields=invalid,
                )
            raise ValidationError(
                f"Invalid value for field(s): {', '.join(invalid)}.",
                fields=invalid,
            )

        quantities = {kind_name: coerce_quantity(payload.get(kind_name)) for kind_name in MATERIAL_KINDS}
        too_large = [kind_name for kind_name, amount in quantities.items() if amount > MAX_QUANTITY]
        if too_large:
            raise ValidationError(
                f"Quantity too large for: {', '.join(too_large)}. The maximum is {MAX_QUANTITY}.",
                fields=too_large,
            )

        return cls(
            date=parsed_date,
            kind=kind,
            source=source,
            party_id=party_id,
            factory_id=factory_id,
            vehicle=vehicle,
            vehicle_number=vehicle_number,
            items=cls._parse_items(payload.get('items')),
            quantities=quantities,
        )

    @staticmethod
    def _parse_items(raw_items) -> List[DraftItem]:
        if raw_items is None:
            return []
        if isinstance(raw_items, (str, bytes, Mapping)):
            raise ValidationError("Items must be a list of {pallet_size, quantity}.", fields=['items'])

        items = []
        for index, raw in enumerate(raw_items):
            if not isinstance(raw, Mapping):
                raise ValidationError(f"Item {index + 1} is not an object.", fields=['items'])
            pallet_size = str(raw.get('pallet_size') or '').strip()
            if not pallet_size:
                raise ValidationError(f"Item {index + 1} has no pallet size.", fields=['items'])
            quantity = coerce_quantity(raw.get('quantity'))
            if quantity <= 0:
                raise ValidationError(
                    f"Item {index + 1} ({pallet_size}) must have a positive quantity.",
                    fields=['items'],
                )
            if quantity > MAX_QUANTITY:
                raise ValidationError(
                    f"Item {index + 1} ({pallet_size}) quantity exceeds the maximum of {MAX_QUANTITY}.",
                    fields=['items'],
                )
            items.append(DraftItem(pallet_size=pallet_size, quantity=quantity))
        return items

    def build_record(self, custom_transaction_id: str) -> TransactionRecord:
        record = TransactionRecord(
            custom_transaction_id=custom_transaction_id,
            date=self.date,
            transaction_kind=self.kind.value,
            source_kind=self.source.kind.value,
            source_id=self.source.id,
            party_id=self.party_id,
            factory_id=self.factory_id,
            vehicle=self.vehicle,
            vehicle_number=self.vehicle_number,
            disabled=False,
            **self.quantities,
        )
        record.items = [
            TransactionItem(position=position, pallet_size=item.pallet_size, quantity=item.quantity)
            for position, item in enumerate(self.items)
        ]
        return record
