"""
Source references

A transaction's source is either a production house (holds stock) or an
associate company (does not). The two cases are separate types so inventory
code branches on the type rather than comparing kind strings.
"""

from dataclasses import dataclass
from typing import Union

from app.data.ledger.kinds import SourceKind
from app.buisness.core.errors import ValidationError


@dataclass(frozen=True)
class ProductionHouseRef:
    id: int

    kind = SourceKind.PRODUCTION_HOUSE
    holds_inventory = True


@dataclass(frozen=True)
class AssociateCompanyRef:
    id: int

    kind = SourceKind.ASSOCIATE_COMPANY
    holds_inventory = False


SourceRef = Union[ProductionHouseRef, AssociateCompanyRef]

_REF_TYPES = {
    SourceKind.PRODUCTION_HOUSE: ProductionHouseRef,
    SourceKind.ASSOCIATE_COMPANY: AssociateCompanyRef,
}


def parse_id(value) -> int:
    """
    Integer id from an int, an integral float or a digit string.
    Booleans and fractional numbers are not ids.

    Raises:
        ValueError: the value is not a whole number
    """
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an id")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(value)


def make_source_ref(kind, source_id) -> SourceRef:
    """
    Build a source reference from a kind tag and an id.

    Raises:
        ValidationError: unknown kind or non-integer id
    """
    try:
        source_kind = SourceKind(kind)
    except ValueError:
        allowed = ', '.join(k.value for k in SourceKind)
        raise ValidationError(
            f"Invalid source kind '{kind}'. Expected one of: {allowed}.",
            fields=['source_kind'],
        )
    try:
        ref_id = parse_id(source_id)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid source id '{source_id}'.", fields=['source_id'])
    return _REF_TYPES[source_kind](ref_id)


def parse_source_filter(value) -> SourceRef:
    """Parse the "Kind:id" form used by listing filters, e.g. "ProductionHouse:3" """
    if isinstance(value, (ProductionHouseRef, AssociateCompanyRef)):
        return value
    kind, sep, source_id = str(value).partition(':')
    if not sep or not kind or not source_id:
        raise ValidationError(
            f"Invalid source filter '{value}'. Expected 'Kind:id'.",
            fields=['source'],
        )
    return make_source_ref(kind, source_id)
