#!/usr/bin/env python3
"""
Sequence Generator
Database-backed named counters used for human-facing transaction numbers
"""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.util import identity_key
from app import db
from app.data.core.sequences.sequence_counter import SequenceCounter
from app.logger import get_logger

logger = get_logger("ledger.sequences")


class SequenceGenerator:
    """
    Hands out the next value of a named counter.

    The increment is a single UPDATE executed on the caller's session, so it
    joins whatever transaction the caller has open. The row lock taken by the
    UPDATE serializes concurrent callers until that transaction ends, which is
    what keeps two requests from reading the same value. No in-process lock is
    used because callers may live in different processes.
    """

    @classmethod
    def next_value(cls, name):
        """
        Increment the named counter and return the new value.

        Creates the counter at 1 when it does not exist yet. Storage failures
        propagate as SQLAlchemy errors; the unit of work translates them.
        """
        result = db.session.execute(
            update(SequenceCounter)
            .where(SequenceCounter.name == name)
            .values(current_value=SequenceCounter.current_value + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            cls._create_counter(name)

        value = db.session.execute(
            select(SequenceCounter.current_value).where(SequenceCounter.name == name)
        ).scalar_one()
        logger.debug(f"Sequence {name} advanced to {value}")
        return value

    @classmethod
    def _create_counter(cls, name):
        """Insert the counter at 1, or bump it if another transaction created it first"""
        try:
            with db.session.begin_nested():
                db.session.add(SequenceCounter(name=name, current_value=1))
            logger.info(f"Created sequence counter {name}")
        except IntegrityError:
            logger.debug(f"Sequence counter {name} created concurrently, incrementing instead")
            db.session.execute(
                update(SequenceCounter)
                .where(SequenceCounter.name == name)
                .values(current_value=SequenceCounter.current_value + 1)
                .execution_options(synchronize_session=False)
            )

    @classmethod
    def ensure_counter(cls, name):
        """Create the counter at 0 if it is missing. Used when building the database."""
        if db.session.get(SequenceCounter, name) is None:
            db.session.add(SequenceCounter(name=name, current_value=0))
            db.session.flush()
            logger.info(f"Initialized sequence counter {name}")

    @classmethod
    def current_value(cls, name):
        """Current value of the counter, 0 if it has never been used"""
        value = db.session.execute(
            select(SequenceCounter.current_value).where(SequenceCounter.name == name)
        ).scalar_one_or_none()
        return value or 0

    @classmethod
    def reset(cls, name, start_value=1):
        """
        Reset the counter so the next call returns start_value.
        Useful for testing or data migration; never call it on a live ledger.
        """
        if start_value < 1:
            raise ValueError("start_value must be at least 1")
        result = db.session.execute(
            update(SequenceCounter)
            .where(SequenceCounter.name == name)
            .values(current_value=start_value - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.session.add(SequenceCounter(name=name, current_value=start_value - 1))
            db.session.flush()
            return

        # A loaded counter may still hold a value from before next_value ran
        instance = db.session.identity_map.get(identity_key(SequenceCounter, name))
        if instance is not None:
            db.session.expire(instance)
