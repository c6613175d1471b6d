"""Storage adapters.

This module contains storage adapters that implement the StoragePort
interface for persisting diagnostic test records.
"""

from dxrecords.adapters.storage.duckdb_adapter import DuckDBAdapter
from dxrecords.adapters.storage.memory_adapter import InMemoryAdapter
from dxrecords.adapters.storage.postgresql_adapter import PostgreSQLAdapter

__all__ = ["DuckDBAdapter", "InMemoryAdapter", "PostgreSQLAdapter"]
