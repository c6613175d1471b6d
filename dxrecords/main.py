"""Storage wiring shared by the API and the CLI."""

import logging
from typing import Optional

from dxrecords.adapters.storage import DuckDBAdapter, InMemoryAdapter, PostgreSQLAdapter
from dxrecords.domain.ports import StoragePort
from dxrecords.infrastructure.config_manager import DatabaseConfig, get_database_config

logger = logging.getLogger(__name__)


def create_storage_adapter(db_config: Optional[DatabaseConfig] = None) -> StoragePort:
    """Create storage adapter based on configuration.

    Parameters:
        db_config: Database configuration (loaded from the environment when omitted)

    Returns:
        StoragePort: Configured storage adapter instance

    Raises:
        ValueError: If database type is unsupported
    """
    db_config = db_config or get_database_config()

    if db_config.db_type == "duckdb":
        logger.info(f"Initializing DuckDB adapter with path: {db_config.db_path or ':memory:'}")
        return DuckDBAdapter(db_config=db_config)
    elif db_config.db_type == "postgresql":
        logger.info(f"Initializing PostgreSQL adapter with host: {db_config.host}")
        return PostgreSQLAdapter(db_config=db_config)
    elif db_config.db_type == "memory":
        logger.info("Initializing in-memory adapter (records are not persisted)")
        return InMemoryAdapter()
    else:
        raise ValueError(f"Unsupported database type: {db_config.db_type}")

