"""Field description lookup backed by a SQL database."""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


DEFAULT_QUERY = (
    "SELECT description "
    "FROM property_descriptions "
    "WHERE property = ? "
    "AND locale = ? "
    "AND description IS NOT NULL "
    "AND UPPER(description) != 'NULL' "
    "ORDER BY description"
)


def to_property_key(name: str) -> str:
    """
    Normalize a field name to the datastore key.

    An underscore is inserted before every uppercase character except the
    first, then the result is uppercased: ``dateOfBirth`` -> ``DATE_OF_BIRTH``.
    """
    formatted = []
    for i, char in enumerate(name):
        if char.isupper() and i != 0:
            formatted.append("_")
        formatted.append(char)
    return "".join(formatted).upper()


class DescriptionLookup(ABC):
    """Base lookup: caches results per field name, never raises."""

    def __init__(self):
        self._cache: Dict[str, Optional[str]] = {}

    def find_description(self, name: str) -> Optional[str]:
        """Return the description for a field name, or None"""
        if name in self._cache:
            return self._cache[name]

        try:
            description = self._fetch(to_property_key(name))
        except Exception as e:
            logger.warning(f"Error fetching description for {name}: {e}")
            description = None

        if description:
            description = description.strip().title()
        self._cache[name] = description or None
        return self._cache[name]

    @abstractmethod
    def _fetch(self, key: str) -> Optional[str]:
        """Description stored under a property key, or None"""

    def close(self) -> None:
        """Release the underlying resource"""


class SqlDescriptionLookup(DescriptionLookup):
    """
    Looks up descriptions through a DB-API connection

    The query takes two parameters (property key, locale) using the
    connection's paramstyle.
    """

    def __init__(self, connection, locale: str = "en_US", query: str = DEFAULT_QUERY):
        super().__init__()
        self.connection = connection
        self.locale = locale
        self.query = query

    def _fetch(self, key: str) -> Optional[str]:
        cursor = self.connection.cursor()
        try:
            cursor.execute(self.query, (key, self.locale))
            row = cursor.fetchone()
        finally:
            cursor.close()
        return row[0] if row else None

    def close(self) -> None:
        self.connection.close()
