"""
Entity Directory
Existence lookups for the entities a transaction references
"""

from app import db
from app.data.core.party import Party
from app.data.core.factory import Factory
from app.data.core.associate_company import AssociateCompany
from app.data.inventory.production_house import ProductionHouse
from app.buisness.core.errors import NotFoundError
from app.buisness.ledger.source_ref import ProductionHouseRef, AssociateCompanyRef


class EntityDirectory:
    """Fetch-by-id for parties, factories and transaction sources"""

    @staticmethod
    def find_party(party_id) -> Party:
        party = db.session.get(Party, party_id)
        if party is None:
            raise NotFoundError('Party', party_id)
        return party

    @staticmethod
    def find_factory(factory_id) -> Factory:
        factory = db.session.get(Factory, factory_id)
        if factory is None:
            raise NotFoundError('Factory', factory_id)
        return factory

    @staticmethod
    def find_source(source_ref):
        """
        Resolve a ProductionHouseRef or AssociateCompanyRef to its entity.

        Raises:
            NotFoundError: no entity of the declared kind with that id
        """
        if isinstance(source_ref, ProductionHouseRef):
            model = ProductionHouse
        elif isinstance(source_ref, AssociateCompanyRef):
            model = AssociateCompany
        else:
            raise TypeError(f"Unsupported source reference: {source_ref!r}")

        source = db.session.get(model, source_ref.id)
        if source is None:
            raise NotFoundError(source_ref.kind.value, source_ref.id)
        return source
