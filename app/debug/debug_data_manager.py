#!/usr/bin/env python3
"""
Debug Data Manager
Loads demo collaborators for local development

Handles:
- Loading app/debug/data/ledger.json
- Skipping insertion when the data is already present
- Inserting parties, factories, associate companies and production houses
- Opening stock for production houses, applied through the inventory store so
  the counters are never written directly
"""

from pathlib import Path
import json
from app import db
from app.logger import get_logger

logger = get_logger("ledger.debug_data_manager")


def insert_debug_data(enabled=True, debug_data=None):
    """
    Insert debug data

    Args:
        enabled (bool): Whether to insert debug data (default: True)
        debug_data (dict): Data to insert instead of the bundled JSON file

    Returns:
        dict: Summary of inserted data

    Raises:
        Exception: If any insertion fails (fail-fast, nothing is kept)
    """
    if not enabled:
        logger.info("Debug data insertion is disabled")
        return {}

    if debug_data is None:
        debug_data = _load_debug_data_file()
    if not debug_data:
        logger.info("No debug data file found, skipping")
        return {'status': 'skipped', 'reason': 'file_not_found'}

    if _check_debug_data_present(debug_data):
        logger.info("Debug data already present, skipping")
        return {'status': 'skipped', 'reason': 'data_present'}

    from app.buisness.core.unit_of_work import UnitOfWork

    logger.info("Inserting debug data...")
    with UnitOfWork("insert_debug_data"):
        summary = _insert_debug_data(debug_data)
    logger.info(f"Debug data insertion completed successfully: {summary}")
    return summary


def _load_debug_data_file():
    """
    Load the debug data JSON file

    Returns:
        dict: Debug data or None if file doesn't exist
    """
    debug_file = Path(__file__).parent / 'data' / 'ledger.json'

    if not debug_file.exists():
        return None

    try:
        with open(debug_file, 'r') as f:
            data = json.load(f)
        logger.debug(f"Loaded debug data file: {debug_file}")
        return data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {debug_file}: {e}")
        raise


def _check_debug_data_present(debug_data):
    """Debug data counts as present when any of its production houses exists"""
    from app.data.inventory.production_house import ProductionHouse

    for house in debug_data.get('ProductionHouses', []):
        if ProductionHouse.query.filter_by(username=house['username']).first():
            return True
    return False


def _insert_debug_data(debug_data):
    from app.data.core.party import Party
    from app.data.core.factory import Factory
    from app.data.core.associate_company import AssociateCompany
    from app.data.inventory.production_house import ProductionHouse
    from app.buisness.inventory.inventory_store import InventoryStore

    store = InventoryStore()
    summary = {'parties': 0, 'factories': 0, 'associate_companies': 0, 'production_houses': 0}

    for party_data in debug_data.get('Parties', []):
        party, created = Party.find_or_create_from_dict(
            {'name': party_data['name']}, lookup_fields=['name']
        )
        summary['parties'] += int(created)
        for factory_name in party_data.get('factories', []):
            _, created = Factory.find_or_create_from_dict(
                {'name': factory_name, 'party_id': party.id},
                lookup_fields=['name', 'party_id'],
            )
            summary['factories'] += int(created)

    for company_data in debug_data.get('AssociateCompanies', []):
        _, created = AssociateCompany.find_or_create_from_dict(company_data)
        summary['associate_companies'] += int(created)

    for house_data in debug_data.get('ProductionHouses', []):
        opening_stock = house_data.get('opening_stock', {})
        house, created = ProductionHouse.find_or_create_from_dict(
            {k: v for k, v in house_data.items() if k != 'opening_stock'},
            lookup_fields=['username'],
        )
        if created:
            store.apply_delta(house.id, opening_stock)
            summary['production_houses'] += 1

    db.session.flush()
    return summary
