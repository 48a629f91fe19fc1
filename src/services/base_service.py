"""
Base service layer for unified database operations
"""

import logging
import uuid
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

import asyncpg

from database.connection import get_db_pool

logger = logging.getLogger(__name__)


class DatabaseConnectionError(RuntimeError):
    """Raised when no usable database connection is available"""


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


class BaseService:
    """Base service with direct SQL access to a single table"""

    def __init__(
        self,
        resource_name: str,
        table_name: str,
        fields: List[str],
        writable_fields: List[str],
        id_field: str = "id",
        default_order_by: Optional[List[Dict[str, str]]] = None
    ):
        self.resource_name = resource_name
        self.table_name = table_name
        self.fields = fields
        self.writable_fields = writable_fields
        self.id_field = id_field
        self.default_order_by = default_order_by or []
        logger.info(f"BaseService initialized for resource: {resource_name}")

    async def create(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Create a new record using INSERT operation

        Args:
            data: Dictionary of field values to insert

        Returns:
            ServiceResult with created record data
        """
        try:
            unknown = [key for key in data if key not in self.fields]
            if unknown:
                return ServiceResult(
                    success=False,
                    error=f"Unknown fields for {self.resource_name}: {', '.join(unknown)}",
                    error_type="VALIDATION_ERROR"
                )

            result = await self._execute_insert_sql(data)

            return ServiceResult(
                success=True,
                data=result["data"],
                count=result["count"]
            )

        except Exception as e:
            logger.error(f"Create operation failed for {self.resource_name}: {e}", exc_info=True)
            return self._error_result(e)

    async def read(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[List[Dict[str, str]]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> ServiceResult:
        """
        Read records using equality filters

        Args:
            filters: Dictionary of field filters {field_name: value}
            order_by: List of ordering specs [{"field": "created", "dir": "desc"}]
            limit: Maximum number of records to return (None for all)
            offset: Number of records to skip

        Returns:
            ServiceResult with matched records
        """
        try:
            unknown = [name for name in (filters or {}) if name not in self.fields]
            if unknown:
                return ServiceResult(
                    success=False,
                    error=f"Unknown filter fields for {self.resource_name}: {', '.join(unknown)}",
                    error_type="VALIDATION_ERROR"
                )

            result = await self._execute_read_sql(
                filters or {},
                order_by if order_by is not None else self.default_order_by,
                limit,
                offset
            )

            return ServiceResult(
                success=True,
                data=result["data"],
                count=result["count"]
            )

        except Exception as e:
            logger.error(f"Read operation failed for {self.resource_name}: {e}")
            return self._error_result(e)

    async def update(self, record_id: str, data: Dict[str, Any]) -> ServiceResult:
        """
        Update a record by primary key

        Args:
            record_id: Primary key value of record to update
            data: Dictionary of field values to update

        Returns:
            ServiceResult with updated record data
        """
        if not data:
            return ServiceResult(
                success=False,
                error="No fields provided for update",
                error_type="VALIDATION_ERROR"
            )

        invalid = [key for key in data if key not in self.writable_fields]
        if invalid:
            return ServiceResult(
                success=False,
                error=f"Fields not writable on {self.resource_name}: {', '.join(invalid)}",
                error_type="VALIDATION_ERROR"
            )

        record_uuid = self._parse_id(record_id)
        if record_uuid is None:
            return self._not_found(record_id)

        try:
            result = await self._execute_update_sql(record_uuid, data)

            if not result["data"]:
                return self._not_found(record_id)

            return ServiceResult(
                success=True,
                data=result["data"],
                count=result["count"]
            )

        except Exception as e:
            logger.error(f"Update operation failed for {self.resource_name}: {e}", exc_info=True)
            return self._error_result(e)

    async def get_by_id(self, record_id: str) -> ServiceResult:
        """
        Get a single record by primary key

        Args:
            record_id: Primary key value

        Returns:
            ServiceResult with the record, or NOT_FOUND
        """
        record_uuid = self._parse_id(record_id)
        if record_uuid is None:
            return self._not_found(record_id)

        result = await self.read(filters={self.id_field: record_uuid}, limit=1)
        if result.success and not result.data:
            return self._not_found(record_id)
        return result

    async def count(self) -> ServiceResult:
        """Count all records in the table"""
        try:
            db_pool = self._require_pool()
            async with db_pool.acquire() as conn:
                total = await conn.fetchval(f"SELECT COUNT(*) FROM {self.table_name}")
            return ServiceResult(success=True, data=[], count=total)
        except Exception as e:
            logger.error(f"Count operation failed for {self.resource_name}: {e}")
            return self._error_result(e)

    def _not_found(self, record_id: Any) -> ServiceResult:
        return ServiceResult(
            success=False,
            error=f"Record with id {record_id} not found",
            error_type="NOT_FOUND"
        )

    def _error_result(self, e: Exception) -> ServiceResult:
        """Map execution failures onto service error types"""
        if isinstance(e, (DatabaseConnectionError, OSError, asyncpg.InterfaceError)):
            return ServiceResult(
                success=False,
                error=f"Database unavailable: {e}",
                error_type="UNAVAILABLE"
            )

        error_msg = str(e).lower()
        if "conflict" in error_msg or "unique constraint" in error_msg:
            return ServiceResult(
                success=False,
                error="Record already exists",
                error_type="CONFLICT_ERROR"
            )
        return ServiceResult(
            success=False,
            error=f"Database operation failed: {e}",
            error_type="DATABASE_ERROR"
        )

    @staticmethod
    def _parse_id(record_id: Any) -> Optional[uuid.UUID]:
        if isinstance(record_id, uuid.UUID):
            return record_id
        try:
            return uuid.UUID(str(record_id))
        except ValueError:
            return None

    @staticmethod
    def _require_pool() -> asyncpg.Pool:
        db_pool = get_db_pool()
        if not db_pool:
            raise DatabaseConnectionError("Database pool not initialized")
        return db_pool

    @staticmethod
    def _serialize_row(row: asyncpg.Record) -> Dict[str, Any]:
        """Convert a row to a dict with ISO datetimes and string UUIDs"""
        data = dict(row)
        for key, value in data.items():
            if hasattr(value, 'isoformat'):
                data[key] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                data[key] = str(value)
        return data

    # Direct SQL execution methods

    async def _execute_read_sql(
        self,
        filters: Dict[str, Any],
        order_by: List[Dict[str, str]],
        limit: Optional[int],
        offset: int
    ) -> Dict[str, Any]:
        """Execute SELECT directly via SQL"""
        db_pool = self._require_pool()

        async with db_pool.acquire() as conn:
            query, params = self._build_read_query(filters, order_by, limit, offset)

            logger.info(f"Executing READ query: {query}")
            logger.info(f"Parameters: {params}")

            try:
                rows = await conn.fetch(query, *params)
                data = [self._serialize_row(row) for row in rows]
                return {
                    "data": data,
                    "count": len(data)
                }

            except asyncpg.PostgresError as e:
                logger.error(f"Database error: {e}")
                raise RuntimeError(f"Database query failed: {str(e)}")

    async def _execute_insert_sql(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Execute INSERT directly via SQL"""
        db_pool = self._require_pool()

        async with db_pool.acquire() as conn:
            async with conn.transaction():
                query, params = self._build_insert_query(data)

                logger.info(f"Executing INSERT: {query}")
                logger.info(f"Parameters: {params}")

                try:
                    row = await conn.fetchrow(query, *params)

                    if not row:
                        raise RuntimeError("Insert operation failed - no data returned")

                    return {
                        "data": [self._serialize_row(row)],
                        "count": 1
                    }

                except asyncpg.UniqueViolationError as e:
                    logger.warning(f"Unique constraint violation: {e}")
                    raise RuntimeError("CONFLICT: Unique constraint violation")
                except asyncpg.PostgresError as e:
                    logger.error(f"Database error during INSERT: {e}")
                    raise RuntimeError(f"Database INSERT failed: {str(e)}")

    async def _execute_update_sql(self, record_id: uuid.UUID, data: Dict[str, Any]) -> Dict[str, Any]:
        """Execute UPDATE directly via SQL"""
        db_pool = self._require_pool()

        async with db_pool.acquire() as conn:
            async with conn.transaction():
                query, params = self._build_update_query(record_id, data)

                logger.info(f"Executing UPDATE: {query}")
                logger.info(f"Parameters: {params}")

                try:
                    row = await conn.fetchrow(query, *params)

                    if not row:
                        return {"data": [], "count": 0}

                    return {
                        "data": [self._serialize_row(row)],
                        "count": 1
                    }

                except asyncpg.PostgresError as e:
                    logger.error(f"Database error during UPDATE: {e}")
                    raise RuntimeError(f"Database UPDATE failed: {str(e)}")

    def _build_read_query(
        self,
        filters: Dict[str, Any],
        order_by: List[Dict[str, str]],
        limit: Optional[int],
        offset: int
    ) -> tuple[str, List[Any]]:
        """Build SELECT query from filters and ordering"""
        params: List[Any] = []
        query = f"SELECT {', '.join(self.fields)} FROM {self.table_name}"

        if filters:
            conditions = []
            for field_name, value in filters.items():
                params.append(value)
                conditions.append(f"{field_name} = ${len(params)}")
            query += " WHERE " + " AND ".join(conditions)

        if order_by:
            clauses = []
            for spec in order_by:
                if spec["field"] not in self.fields:
                    raise ValueError(f"Cannot order by unknown field: {spec['field']}")
                direction = "DESC" if spec.get("dir", "asc").lower() == "desc" else "ASC"
                clauses.append(f"{spec['field']} {direction}")
            query += " ORDER BY " + ", ".join(clauses)

        if limit is not None:
            params.append(limit)
            query += f" LIMIT ${len(params)}"
        if offset:
            params.append(offset)
            query += f" OFFSET ${len(params)}"

        return query, params

    def _build_insert_query(self, data: Dict[str, Any]) -> tuple[str, List[Any]]:
        """Build INSERT ... RETURNING query"""
        columns = list(data.keys())
        params = [data[column] for column in columns]
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))

        query = (
            f"INSERT INTO {self.table_name} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) "
            f"RETURNING {', '.join(self.fields)}"
        )
        return query, params

    def _build_update_query(self, record_id: uuid.UUID, data: Dict[str, Any]) -> tuple[str, List[Any]]:
        """Build UPDATE ... RETURNING query for a single primary key"""
        columns = list(data.keys())
        params: List[Any] = [data[column] for column in columns]
        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(columns, start=1))
        params.append(record_id)

        query = (
            f"UPDATE {self.table_name} SET {assignments} "
            f"WHERE {self.id_field} = ${len(params)} "
            f"RETURNING {', '.join(self.fields)}"
        )
        return query, params
