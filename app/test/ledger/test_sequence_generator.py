"""
Tests for the named sequence counters
"""

from app.data.core.sequences.sequence_counter import SequenceCounter
from app.data.core.sequences.sequence_generator import SequenceGenerator


def test_first_value_creates_counter_at_one(db):
    """A counter that does not exist yet starts at 1"""
    assert db.session.get(SequenceCounter, 'orderId') is None

    assert SequenceGenerator.next_value('orderId') == 1
    db.session.commit()

    assert SequenceGenerator.current_value('orderId') == 1


def test_values_increase_without_gaps(db):
    values = [SequenceGenerator.next_value('billId') for _ in range(5)]
    db.session.commit()

    assert values == [1, 2, 3, 4, 5]


def test_counters_are_independent(db):
    SequenceGenerator.next_value('orderId')
    SequenceGenerator.next_value('orderId')

    assert SequenceGenerator.next_value('billId') == 1
    assert SequenceGenerator.next_value('orderId') == 3


def test_rolled_back_increment_is_not_consumed(db):
    """The bump is part of the caller's transaction"""
    SequenceGenerator.next_value('orderId')
    db.session.commit()

    SequenceGenerator.next_value('orderId')
    db.session.rollback()

    assert SequenceGenerator.current_value('orderId') == 1
    assert SequenceGenerator.next_value('orderId') == 2


def test_ensure_counter_starts_at_zero(db):
    SequenceGenerator.ensure_counter('orderId')
    SequenceGenerator.ensure_counter('orderId')
    db.session.commit()

    assert SequenceGenerator.current_value('orderId') == 0
    assert SequenceGenerator.next_value('orderId') == 1


def test_current_value_of_unknown_counter_is_zero(db):
    assert SequenceGenerator.current_value('neverUsed') == 0


def test_reset(db):
    SequenceGenerator.next_value('orderId')
    SequenceGenerator.reset('orderId', start_value=100)

    assert SequenceGenerator.next_value('orderId') == 100


def test_reset_with_stale_loaded_counter(db):
    """A counter loaded before next_value ran must not hide the reset"""
    SequenceGenerator.ensure_counter('orderId')
    counter = db.session.get(SequenceCounter, 'orderId')
    assert counter.current_value == 0

    assert SequenceGenerator.next_value('orderId') == 1
    SequenceGenerator.reset('orderId', start_value=1)

    assert SequenceGenerator.next_value('orderId') == 1
    assert counter.current_value == 1


def test_reset_creates_missing_counter(db):
    SequenceGenerator.reset('billId', start_value=10)

    assert SequenceGenerator.next_value('billId') == 10
