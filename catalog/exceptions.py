"""
Exceptions raised by the catalog store.
"""

from typing import List, Optional


class CatalogError(Exception):
    """Base class for catalog store errors."""


class ValidationError(CatalogError):
    """Raised when required book fields are missing or empty."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or []
