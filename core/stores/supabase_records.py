# =============================================================================
# core/stores/supabase_records.py - Supabase (PostgREST) Record Store
# =============================================================================
# RecordStore backed by one Supabase table.
#
# Array columns are mutated through Postgres functions when they are deployed
# (see sql/schema.sql), which makes append/remove atomic. If a function is
# missing the store falls back to read-modify-write on the current row; that
# fallback can lose a concurrent append to the same row.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from supabase import Client

from core.stores.base import RecordNotFoundError, RecordStore, RecordStoreError
from lib.supabase_client import FUNCTION_NOT_FOUND_CODES, postgrest_error_code
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArrayFunctions:
    """Names of the Postgres functions that mutate one array column."""
    append: str
    remove: str
    id_arg: str = "business_id"
    value_arg: str = "image_url"


class SupabaseRecordStore(RecordStore):
    """
    RecordStore for a Supabase table.

    Example:
        store = SupabaseRecordStore(
            client,
            table="business",
            array_functions={"images": ArrayFunctions(
                append="add_image_to_business",
                remove="remove_image_from_business",
            )},
        )
        row = store.append_to_array_field(business_id, "images", path)
    """

    def __init__(
        self,
        client: Client,
        table: str,
        array_functions: dict[str, ArrayFunctions] | None = None,
    ):
        self._client = client
        self._table = table
        self._array_functions = dict(array_functions or {})

    # -------------------------------------------------------------------------
    # Row Operations
    # -------------------------------------------------------------------------

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.table(self._table).insert(data).execute()
        except Exception as e:
            raise self._wrap("insert", e) from e

        if not response.data:
            raise RecordStoreError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": self._table},
            )
        return response.data[0]

    def get_by_id(self, record_id: str) -> dict[str, Any] | None:
        record_id = normalize_uuid(record_id)
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise self._wrap("fetch", e, record_id) from e

        rows = response.data or []
        return rows[0] if rows else None

    def list_all(self) -> list[dict[str, Any]]:
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise self._wrap("list", e) from e
        return response.data or []

    def update(self, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        record_id = normalize_uuid(record_id)
        try:
            response = (
                self._client.table(self._table)
                .update(fields)
                .eq("id", record_id)
                .execute()
            )
        except Exception as e:
            raise self._wrap("update", e, record_id) from e

        if not response.data:
            raise RecordNotFoundError(record_id)
        return response.data[0]

    def delete(self, record_id: str) -> None:
        record_id = normalize_uuid(record_id)
        try:
            self._client.table(self._table).delete().eq("id", record_id).execute()
        except Exception as e:
            raise self._wrap("delete", e, record_id) from e

    # -------------------------------------------------------------------------
    # Array Column Operations
    # -------------------------------------------------------------------------

    def append_to_array_field(self, record_id: str, field: str, value: str) -> dict[str, Any]:
        record_id = normalize_uuid(record_id)
        functions = self._array_functions.get(field)

        if functions:
            row = self._call_array_function(functions.append, functions, record_id, value)
            if row is not None:
                return row

        current = self._require_row(record_id)
        values = list(current.get(field) or [])
        if value in values:
            return current
        return self.update(record_id, {field: values + [value]})

    def remove_from_array_field(self, record_id: str, field: str, value: str) -> dict[str, Any]:
        record_id = normalize_uuid(record_id)
        functions = self._array_functions.get(field)

        if functions:
            row = self._call_array_function(functions.remove, functions, record_id, value)
            if row is not None:
                return row

        current = self._require_row(record_id)
        values = list(current.get(field) or [])
        if value not in values:
            return current
        return self.update(record_id, {field: [v for v in values if v != value]})

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _call_array_function(
        self,
        name: str,
        functions: ArrayFunctions,
        record_id: str,
        value: str,
    ) -> dict[str, Any] | None:
        """
        Run an array function and return the updated row.

        Returns None when the function isn't deployed; the caller then falls
        back to read-modify-write.
        """
        params = {functions.id_arg: record_id, functions.value_arg: value}
        try:
            response = self._client.rpc(name, params).execute()
        except Exception as e:
            if postgrest_error_code(e) in FUNCTION_NOT_FOUND_CODES:
                logger.warning(
                    f"Postgres function {name} unavailable, "
                    f"falling back to read-modify-write on {self._table}"
                )
                return None
            raise self._wrap(f"rpc {name}", e, record_id) from e

        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            raise RecordNotFoundError(record_id)
        return data

    def _require_row(self, record_id: str) -> dict[str, Any]:
        row = self.get_by_id(record_id)
        if row is None:
            raise RecordNotFoundError(record_id)
        return row

    def _wrap(self, operation: str, exc: Exception, record_id: str | None = None) -> RecordStoreError:
        code = postgrest_error_code(exc)
        logger.error(f"Record store {operation} on {self._table} failed: {exc}")
        details: dict[str, Any] = {"table": self._table, "operation": operation}
        if record_id:
            details["record_id"] = record_id
        if code:
            details["postgrest_code"] = code
        return RecordStoreError(
            message=f"Failed to {operation} {self._table} record",
            code="RECORD_STORE_ERROR",
            details=details,
        )
