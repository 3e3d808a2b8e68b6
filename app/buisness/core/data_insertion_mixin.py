"""
Dictionary conversion for SQLAlchemy models

Seeding builds rows from the JSON data files with from_dict(); the API layer
answers with to_dict(), which renders dates as ISO strings and never includes
a model's PRIVATE_FIELDS.
"""

from app import db
from datetime import date, datetime
from sqlalchemy import inspect
from app.logger import get_logger

logger = get_logger("assetverse.domain.core.data_insertion")

AUDIT_FIELDS = ('created_at', 'updated_at')


class DataInsertionMixin:
    """
    Mixin for models that are seeded from JSON and serialized to JSON

    - from_dict(): build an unsaved instance, ignoring keys that are not columns
    - to_dict(): JSON-safe column values
    - find_or_create_from_dict(): idempotent insert keyed on lookup fields
    """

    # Columns never exposed through to_dict()
    PRIVATE_FIELDS = frozenset()

    @classmethod
    def _column_keys(cls):
        return [column.key for column in inspect(cls).columns]

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Args:
            data_dict (dict): Column values; unknown keys are dropped
            skip_fields (list, optional): Columns to leave at their defaults

        Returns:
            Model instance (not added to the session)
        """
        skip = set(skip_fields or ())
        values = {
            key: data_dict[key]
            for key in cls._column_keys()
            if key in data_dict and key not in skip
            and not (key in AUDIT_FIELDS and data_dict[key] is None)
        }
        return cls(**values)

    def to_dict(self, include_audit_fields=True):
        """
        Args:
            include_audit_fields (bool): Whether to include created_at/updated_at

        Returns:
            dict: Column name -> value, dates as ISO 8601 strings
        """
        result = {}
        for key in self._column_keys():
            if key in self.PRIVATE_FIELDS:
                continue
            if not include_audit_fields and key in AUDIT_FIELDS:
                continue
            value = getattr(self, key)
            result[key] = value.isoformat() if isinstance(value, (datetime, date)) else value
        return result

    @classmethod
    def find_or_create_from_dict(cls, data_dict, lookup_fields, skip_fields=None):
        """
        Return the row matching lookup_fields, or stage a new one (caller commits).

        Returns:
            tuple: (instance, created)
        """
        lookup = {field: data_dict[field] for field in lookup_fields if field in data_dict}
        existing = db.session.query(cls).filter_by(**lookup).first() if lookup else None
        if existing is not None:
            logger.debug(f"Found existing {cls.__name__}: {existing}")
            return existing, False

        instance = cls.from_dict(data_dict, skip_fields)
        db.session.add(instance)
        logger.info(f"Created {cls.__name__}: {instance}")
        return instance, True
