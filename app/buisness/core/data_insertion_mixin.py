"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict / to_dict and the find-or-create helper used when seeding
collaborator data (parties, factories, sources).
"""

from app import db
from datetime import date, datetime
from sqlalchemy import inspect
from app.logger import get_logger

logger = get_logger("ledger.core.data_insertion")


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - find_or_create_from_dict(): Look up by unique columns, insert when missing
    """

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Unknown keys are ignored; timestamp columns given as None are skipped so
        the column defaults apply.

        Returns:
            Model instance (not added to the session)
        """
        if skip_fields is None:
            skip_fields = []

        mapper = inspect(cls)
        columns = {c.key for c in mapper.columns}

        filtered_data = {}
        for key, value in data_dict.items():
            if key not in columns or key in skip_fields:
                continue
            if key in ('created_at', 'updated_at') and value is None:
                continue
            filtered_data[key] = value

        return cls(**filtered_data)

    def to_dict(self, include_audit_fields=True):
        """
        Convert model instance to dictionary

        Args:
            include_audit_fields (bool): Whether to include created_at/updated_at

        Returns:
            dict: Column values, with dates rendered as ISO strings
        """
        result = {}
        mapper = inspect(self.__class__)

        for column in mapper.columns:
            if not include_audit_fields and column.key in ('created_at', 'updated_at'):
                continue
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            else:
                result[column.key] = value

        return result

    @classmethod
    def find_or_create_from_dict(cls, data_dict, lookup_fields=None):
        """
        Find existing instance or create new one from dictionary

        The caller owns the transaction; this only adds and flushes.

        Args:
            data_dict (dict): Dictionary containing model data
            lookup_fields (list, optional): Fields to use for lookup (default: unique columns)

        Returns:
            tuple: (instance, created) where created is boolean
        """
        if lookup_fields is None:
            mapper = inspect(cls)
            lookup_fields = [c.key for c in mapper.columns if c.unique and c.key in data_dict]

        lookup_data = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        if lookup_data:
            existing = cls.query.filter_by(**lookup_data).first()
            if existing:
                logger.debug(f"Found existing {cls.__name__}: {existing}")
                return existing, False

        instance = cls.from_dict(data_dict)
        db.session.add(instance)
        db.session.flush()
        logger.info(f"Created {cls.__name__}: {instance}")
        return instance, True
