"""
Pytest configuration and fixtures for the ledger tests
"""
from types import SimpleNamespace

import pytest
from app import create_app
from app import db as _db


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'LOG_LEVEL': 'WARNING',
    'LOG_DIR': '',
    'TRANSACTION_ID_PAD_WIDTH': 4,
}


def seed_entities(db):
    """
    A party with a factory, an associate company, and a production house
    stocked with film_white=100, patti_role=10. Committed.
    """
    from app.data.core.party import Party
    from app.data.core.factory import Factory
    from app.data.core.associate_company import AssociateCompany
    from app.data.inventory.production_house import ProductionHouse
    from app.buisness.inventory.inventory_store import InventoryStore

    party = Party(name='Shree Agro Exports')
    db.session.add(party)
    db.session.flush()
    factory = Factory(name='Shree Agro Unit 1', party_id=party.id)
    company = AssociateCompany(name='Narmada Packaging Co.')
    house = ProductionHouse(name='Central Production House', username='central', email='central@example.com')
    db.session.add_all([factory, company, house])
    db.session.flush()

    InventoryStore().apply_delta(house.id, {'film_white': 100, 'patti_role': 10})
    db.session.commit()

    return SimpleNamespace(
        party_id=party.id,
        factory_id=factory.id,
        associate_company_id=company.id,
        production_house_id=house.id,
    )


def payload_factory(entities):
    """Build transaction payloads against seeded entities"""
    def _make_payload(transaction_kind='order', source_kind='ProductionHouse', **overrides):
        source_id = (
            entities.production_house_id
            if source_kind == 'ProductionHouse'
            else entities.associate_company_id
        )
        payload = {
            'date': '2024-03-15T10:30:00',
            'transaction_kind': transaction_kind,
            'source_kind': source_kind,
            'source_id': source_id,
            'party_id': entities.party_id,
            'factory_id': entities.factory_id,
            'vehicle': 'Tata 407',
            'vehicle_number': 'MP09 AB 1234',
            'items': [{'pallet_size': '48x40', 'quantity': 12}],
        }
        payload.update(overrides)
        return payload

    return _make_payload


@pytest.fixture(scope='session')
def app():
    """Create Flask application for testing, backed by an in-memory database"""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def db(app):
    """Fresh schema for every test"""
    _db.create_all()
    yield _db
    _db.session.rollback()
    _db.session.remove()
    _db.drop_all()


@pytest.fixture(scope='function')
def entities(db):
    """Collaborators most tests need, see seed_entities"""
    return seed_entities(db)


@pytest.fixture
def make_payload(entities):
    """Build a transaction payload against the seeded entities"""
    return payload_factory(entities)


@pytest.fixture(scope='function')
def file_ledger(app, tmp_path):
    """
    A second app on a SQLite file, so separate threads get separate
    connections to the same database. Seeded like `entities`, with the
    sequence counters created up front.
    """
    from app.build import initialize_sequences

    file_app = create_app(dict(
        TEST_CONFIG,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'ledger.db'}",
        SQLALCHEMY_ENGINE_OPTIONS={'connect_args': {'check_same_thread': False, 'timeout': 10}},
    ))

    with file_app.app_context():
        _db.create_all()
        initialize_sequences()
        seeded = seed_entities(_db)
        _db.session.remove()

    yield SimpleNamespace(
        app=file_app,
        entities=seeded,
        make_payload=payload_factory(seeded),
    )

    with file_app.app_context():
        _db.engine.dispose()
