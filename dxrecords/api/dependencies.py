"""Dependency injection for the records API.

The storage adapter is the only shared, process-wide resource. Routes
receive it (and the RecordService built on it) through FastAPI
dependencies, so tests can swap in an InMemoryAdapter with
app.dependency_overrides.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from dxrecords.domain.ports import StoragePort
from dxrecords.domain.service import RecordService
from dxrecords.main import create_storage_adapter

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_adapter() -> StoragePort:
    """Get storage adapter instance (cached).

    The adapter is created from environment configuration on first use.
    It creates its schema lazily on the first record operation, so a
    database that is down at startup only fails the requests that need it.

    Returns:
        StoragePort: Configured storage adapter instance

    Raises:
        StorageError: If the adapter rejects the configuration
        ValueError: If the configuration is invalid
    """
    storage = create_storage_adapter()
    logger.debug(f"Storage adapter ready: {storage.db_type}")
    return storage


def get_record_service(storage: Annotated[StoragePort, Depends(get_storage_adapter)]) -> RecordService:
    return RecordService(storage)


# Type aliases for dependency injection
StorageDep = Annotated[StoragePort, Depends(get_storage_adapter)]
RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]
