#!/usr/bin/env python3
"""
Database build for the order ledger
Creates the tables, makes sure the sequence counters exist and optionally
loads debug data.
"""

from app import create_app, db
from app.logger import get_logger

logger = get_logger("ledger.build")

SEQUENCE_COUNTERS = ('orderId', 'billId')


def build_database(enable_debug_data=True, app=None):
    """
    Build the database

    Args:
        enable_debug_data (bool): Insert the demo parties, factories and sources
        app: Existing Flask app (a new one is created when omitted)

    Returns:
        dict: Summary of what was inserted
    """
    if app is None:
        app = create_app()

    with app.app_context():
        logger.info("Creating tables...")
        db.create_all()
        initialize_sequences()

        summary = {}
        if enable_debug_data:
            from app.debug.debug_data_manager import insert_debug_data
            summary = insert_debug_data(enabled=True)
        else:
            logger.info("Debug data insertion is disabled")

        logger.info("Database build complete")
        return summary


def initialize_sequences():
    """Create the order and bill counters at 0 if they are missing"""
    from app.data.core.sequences.sequence_generator import SequenceGenerator

    try:
        for name in SEQUENCE_COUNTERS:
            SequenceGenerator.ensure_counter(name)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error initializing sequence counters: {e}")
        raise
