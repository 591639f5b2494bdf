"""
Tests for payload coercion and required-field checks
"""

from datetime import datetime, date, timezone

import pytest

from app.buisness.core.errors import ValidationError
from app.buisness.ledger.source_ref import (
    AssociateCompanyRef,
    ProductionHouseRef,
    make_source_ref,
    parse_id,
    parse_source_filter,
)
from app.buisness.ledger.transaction_draft import TransactionDraft, coerce_quantity, parse_date
from app.data.ledger.kinds import TransactionKind


BASE_PAYLOAD = {
    'date': '2024-03-15',
    'transaction_kind': 'order',
    'source_kind': 'ProductionHouse',
    'source_id': 1,
    'party_id': 2,
    'factory_id': 3,
    'vehicle': 'Tata 407',
    'vehicle_number': 'MP09 AB 1234',
}


@pytest.mark.parametrize('value, expected', [
    (30, 30),
    ('30', 30),
    (' 12 rolls', 12),
    (7.9, 7),
    (None, 0),
    ('', 0),
    ('abc', 0),
    (True, 0),
    (-5, 0),
    ('-5', 0),
    ([3], 0),
])
def test_coerce_quantity(value, expected):
    assert coerce_quantity(value) == expected


def test_parse_date_forms():
    assert parse_date('2024-03-15') == datetime(2024, 3, 15)
    assert parse_date(date(2024, 3, 15)) == datetime(2024, 3, 15)
    assert parse_date('2024-03-15T10:30:00Z') == datetime(2024, 3, 15, 10, 30)
    aware = datetime(2024, 3, 15, 16, 0, tzinfo=timezone.utc)
    assert parse_date(aware) == datetime(2024, 3, 15, 16, 0)


def test_parse_date_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_date('next tuesday')


def test_draft_from_complete_payload():
    payload = dict(BASE_PAYLOAD, film_white='30', cap_hit=None, items=[{'pallet_size': '48x40', 'quantity': '4'}])
    draft = TransactionDraft.from_payload(payload)

    assert draft.kind is TransactionKind.ORDER
    assert draft.source == ProductionHouseRef(1)
    assert draft.quantities['film_white'] == 30
    assert draft.quantities['cap_hit'] == 0
    assert len(draft.quantities) == 17
    assert draft.positive_quantities() == {'film_white': 30}
    assert draft.items[0].pallet_size == '48x40'
    assert draft.items[0].quantity == 4
    assert draft.affects_inventory


def test_bill_and_associate_company_orders_do_not_affect_inventory():
    bill = TransactionDraft.from_payload(dict(BASE_PAYLOAD, transaction_kind='bill'))
    assert not bill.affects_inventory

    company_order = TransactionDraft.from_payload(dict(BASE_PAYLOAD, source_kind='AssociateCompany'))
    assert isinstance(company_order.source, AssociateCompanyRef)
    assert not company_order.affects_inventory


@pytest.mark.parametrize('field', [
    'date', 'transaction_kind', 'source_kind', 'source_id',
    'party_id', 'factory_id', 'vehicle', 'vehicle_number',
])
def test_missing_required_field(field):
    payload = dict(BASE_PAYLOAD)
    del payload[field]

    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload(payload)
    assert field in exc_info.value.fields


def test_all_missing_fields_reported_together():
    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload({'vehicle': '  '})

    assert set(exc_info.value.fields) >= {'date', 'transaction_kind', 'vehicle', 'vehicle_number'}


def test_unknown_transaction_kind():
    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload(dict(BASE_PAYLOAD, transaction_kind='refund'))
    assert "Expected 'order' or 'bill'" in exc_info.value.message


def test_unknown_source_kind():
    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload(dict(BASE_PAYLOAD, source_kind='Warehouse'))
    assert exc_info.value.fields == ['source_kind']


def test_source_ref_can_be_passed_directly():
    payload = dict(BASE_PAYLOAD)
    del payload['source_kind']
    del payload['source_id']
    payload['source'] = AssociateCompanyRef(4)

    assert TransactionDraft.from_payload(payload).source == AssociateCompanyRef(4)


@pytest.mark.parametrize('items', [
    [{'pallet_size': '', 'quantity': 3}],
    [{'pallet_size': '48x40', 'quantity': 0}],
    [{'pallet_size': '48x40', 'quantity': 'none'}],
    ['48x40'],
    {'pallet_size': '48x40', 'quantity': 3},
    [{'pallet_size': '48x40', 'quantity': 2**31}],
])
def test_bad_items_are_rejected(items):
    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload(dict(BASE_PAYLOAD, items=items))
    assert exc_info.value.fields == ['items']


def test_parse_source_filter():
    assert parse_source_filter('ProductionHouse:3') == ProductionHouseRef(3)
    assert parse_source_filter(AssociateCompanyRef(2)) == AssociateCompanyRef(2)
    with pytest.raises(ValidationError):
        parse_source_filter('ProductionHouse')
    with pytest.raises(ValidationError):
        make_source_ref('ProductionHouse', 'abc')


def test_quantity_beyond_column_range_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload(dict(BASE_PAYLOAD, film_white=10**20, cap_hit='3000000000'))

    assert exc_info.value.fields == ['film_white', 'cap_hit']


def test_largest_quantity_is_accepted():
    draft = TransactionDraft.from_payload(dict(BASE_PAYLOAD, film_white=2**31 - 1))
    assert draft.quantities['film_white'] == 2**31 - 1


@pytest.mark.parametrize('value, expected', [
    (3, 3),
    ('3', 3),
    (' 3 ', 3),
    (4.0, 4),
])
def test_parse_id(value, expected):
    assert parse_id(value) == expected


@pytest.mark.parametrize('value', [True, False, 1.9, float('nan'), '1.9', 'abc'])
def test_parse_id_rejects_non_ids(value):
    with pytest.raises(ValueError):
        parse_id(value)


@pytest.mark.parametrize('field, value', [
    ('party_id', True),
    ('factory_id', 2.5),
    ('source_id', True),
    ('source_id', 1.9),
])
def test_ids_must_be_whole_numbers(field, value):
    with pytest.raises(ValidationError) as exc_info:
        TransactionDraft.from_payload(dict(BASE_PAYLOAD, **{field: value}))
    assert field in exc_info.value.fields
