"""Catalog store implementations."""

from .base import CatalogStore
from .memory import InMemoryCatalogStore
from .mysql import MySQLCatalogStore

__all__ = ["CatalogStore", "InMemoryCatalogStore", "MySQLCatalogStore"]
