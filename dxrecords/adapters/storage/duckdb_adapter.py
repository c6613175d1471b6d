"""DuckDB Storage Adapter.

This adapter implements the StoragePort contract for persisting diagnostic
test records to DuckDB, an in-process database that needs no server. It is
the default engine for local development and single-node deployments.

Security Impact:
    - Only validated CandidateRecord instances can be persisted
    - Parameterized statements only; no value is interpolated into SQL
    - Engine errors are wrapped in StorageError; the cause is logged, not returned

Architecture:
    - Implements StoragePort (Hexagonal Architecture)
    - Isolated from domain core - only depends on ports and models
    - One cursor per operation so concurrent requests never share a cursor
    - Update and delete are single UPDATE/DELETE ... RETURNING statements (atomic)
"""

import logging
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

import duckdb

from dxrecords.domain.ports import NotFoundError, Result, StorageError, StoragePort
from dxrecords.domain.records import CandidateRecord, DiagnosticTestRecord
from dxrecords.infrastructure.config_manager import DatabaseConfig

logger = logging.getLogger(__name__)

TABLE_NAME = "diagnostic_tests"
COLUMNS = "id, patient_name, test_type, result, test_date, notes"


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """DuckDB TIMESTAMP columns hold naive values; everything stored is UTC."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _row_to_record(row: tuple) -> DiagnosticTestRecord:
    record_id, patient_name, test_type, result, test_date, notes = row
    return DiagnosticTestRecord(
        id=record_id,
        patient_name=patient_name,
        test_type=test_type,
        result=result,
        test_date=test_date,
        notes=notes,
    )


class DuckDBAdapter(StoragePort):
    """DuckDB implementation of StoragePort.

    Parameters:
        db_config: DatabaseConfig from configuration manager (preferred)
        db_path: Path to DuckDB database file (or ':memory:' for in-memory)

    Example Usage:
        ```python
        from dxrecords.infrastructure.config_manager import get_database_config

        adapter = DuckDBAdapter(db_config=get_database_config())
        # Or using db_path directly
        adapter = DuckDBAdapter(db_path="data/records.duckdb")

        adapter.initialize_schema()
        record = adapter.create(candidate)
        ```

    Note:
        If both db_config and db_path are provided, db_config takes precedence.
        If neither is provided, defaults to in-memory database.
    """

    db_type = "duckdb"

    def __init__(
        self,
        db_config: Optional[DatabaseConfig] = None,
        db_path: Optional[str] = None,
    ):
        if db_config:
            if db_config.db_type != "duckdb":
                raise StorageError(
                    f"DatabaseConfig type '{db_config.db_type}' does not match DuckDB adapter",
                    operation="__init__"
                )
            self.db_path = db_config.db_path or ":memory:"
        else:
            self.db_path = db_path or ":memory:"

        self.db_config = db_config
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._schema_initialized = False
        self._schema_lock = threading.Lock()

        if self.db_path != ":memory:":
            db_path_obj = Path(self.db_path)
            if not db_path_obj.parent.exists():
                raise StorageError(
                    f"Database directory does not exist: {db_path_obj.parent}",
                    operation="__init__"
                )

    def _get_connection(self) -> duckdb.DuckDBPyConnection:
        """Get or create the process-wide DuckDB connection.

        Returns:
            DuckDB connection instance
        """
        if self._connection is None:
            try:
                self._connection = duckdb.connect(self.db_path)
                logger.info(f"Connected to DuckDB database: {self.db_path}")
            except duckdb.Error as e:
                raise StorageError(
                    f"Failed to connect to DuckDB: {str(e)}",
                    operation="connect",
                    details={"db_path": self.db_path}
                ) from e
        return self._connection

    @contextmanager
    def _cursor(self, operation: str) -> Iterator[duckdb.DuckDBPyConnection]:
        """Yield a per-operation cursor, wrapping engine errors in StorageError."""
        connection = self._get_connection()
        try:
            cursor = connection.cursor()
        except duckdb.Error as e:
            raise StorageError(f"Failed to open DuckDB cursor: {str(e)}", operation=operation) from e

        try:
            yield cursor
        except duckdb.Error as e:
            logger.error(f"DuckDB {operation} failed: {str(e)}", exc_info=True)
            raise StorageError(f"Failed to {operation.replace('_', ' ')} test record", operation=operation) from e
        finally:
            cursor.close()

    def _ensure_schema(self) -> None:
        """Create the table once per adapter instance (double-checked under a lock).

        Raises:
            StorageError: If the schema cannot be created (retried on the next call)
        """
        if self._schema_initialized:
            return

        with self._schema_lock:
            if self._schema_initialized:
                return

            with self._cursor("initialize_schema") as cursor:
                cursor.execute(f"""
                    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                        id VARCHAR PRIMARY KEY,
                        patient_name VARCHAR NOT NULL,
                        test_type VARCHAR NOT NULL,
                        result VARCHAR NOT NULL,
                        test_date TIMESTAMP NOT NULL,
                        notes VARCHAR
                    )
                """)
            self._schema_initialized = True
            logger.info("Database schema initialized successfully")

    def initialize_schema(self) -> Result[None]:
        """Create the diagnostic_tests table if it does not exist.

        Operations also create it on first use.

        Returns:
            Result[None]: Success or failure result
        """
        try:
            self._ensure_schema()
        except StorageError as e:
            return Result.failure_result(e, error_type="StorageError")
        return Result.success_result(None)

    def create(self, candidate: CandidateRecord) -> DiagnosticTestRecord:
        self._ensure_schema()
        record = DiagnosticTestRecord.from_candidate(candidate)
        with self._cursor("create") as cursor:
            cursor.execute(
                f"INSERT INTO {TABLE_NAME} ({COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                [
                    record.id,
                    record.patient_name,
                    record.test_type,
                    record.result,
                    _to_naive_utc(record.test_date),
                    record.notes,
                ],
            )
        return record

    def get(self, record_id: str) -> DiagnosticTestRecord:
        self._ensure_schema()
        with self._cursor("get") as cursor:
            row = cursor.execute(
                f"SELECT {COLUMNS} FROM {TABLE_NAME} WHERE id = ?", [record_id]
            ).fetchone()
        if row is None:
            raise NotFoundError(record_id)
        return _row_to_record(row)

    def list(self, order_by_date: bool = False) -> List[DiagnosticTestRecord]:
        self._ensure_schema()
        query = f"SELECT {COLUMNS} FROM {TABLE_NAME}"
        if order_by_date:
            query += " ORDER BY test_date DESC"
        with self._cursor("list") as cursor:
            rows = cursor.execute(query).fetchall()
        return [_row_to_record(row) for row in rows]

    def update(self, record_id: str, candidate: CandidateRecord) -> DiagnosticTestRecord:
        self._ensure_schema()
        with self._cursor("update") as cursor:
            row = cursor.execute(
                f"""
                UPDATE {TABLE_NAME}
                SET patient_name = ?,
                    test_type = ?,
                    result = ?,
                    notes = ?,
                    test_date = COALESCE(CAST(? AS TIMESTAMP), test_date)
                WHERE id = ?
                RETURNING {COLUMNS}
                """,
                [
                    candidate.patient_name,
                    candidate.test_type,
                    candidate.result,
                    candidate.notes,
                    _to_naive_utc(candidate.test_date),
                    record_id,
                ],
            ).fetchone()
        if row is None:
            raise NotFoundError(record_id)
        return _row_to_record(row)

    def delete(self, record_id: str) -> DiagnosticTestRecord:
        self._ensure_schema()
        with self._cursor("delete") as cursor:
            row = cursor.execute(
                f"DELETE FROM {TABLE_NAME} WHERE id = ? RETURNING {COLUMNS}", [record_id]
            ).fetchone()
        if row is None:
            raise NotFoundError(record_id)
        return _row_to_record(row)

    def ping(self) -> Result[float]:
        """Run SELECT 1 and report the round-trip time in milliseconds."""
        start_time = time.time()
        try:
            with self._cursor("ping") as cursor:
                cursor.execute("SELECT 1").fetchone()
        except StorageError as e:
            return Result.failure_result(e, error_type="StorageError")
        return Result.success_result(round((time.time() - start_time) * 1000, 2))

    def close(self) -> None:
        """Close the DuckDB connection."""
        if self._connection is not None:
            try:
                self._connection.close()
                logger.info("Closed DuckDB connection")
            except duckdb.Error as e:
                logger.warning(f"Error closing DuckDB connection: {str(e)}")
            finally:
                self._connection = None
                # An in-memory database is gone once its connection closes
                self._schema_initialized = False
