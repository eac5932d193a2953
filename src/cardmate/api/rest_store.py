"""
Relational store client for a PostgREST-style hosted backend.
"""

from typing import Any

from cardmate.api.base_api import BaseAPI
from cardmate.exceptions import APIError
from cardmate.exceptions import APIResponseError
from cardmate.exceptions import StoreConstraintError
from cardmate.exceptions import StoreError
from cardmate.store.base import TABLES
from cardmate.store.base import Filters
from cardmate.store.base import RemoteStore
from cardmate.store.base import Row

# PostgREST answers 409 for unique and foreign key violations
CONFLICT_STATUS = 409

def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"

class RestStore(BaseAPI, RemoteStore):
    """Store reached over HTTP; change events are published for this client's writes."""

    DEFAULT_RETRY_TOTAL = 0
    RETURN_REPRESENTATION = {'Prefer': 'return=representation'}

    def __init__(self, base_url: str, api_key: str, access_token: str | None = None):
        """Initialize store client.

        Args:
            base_url: REST endpoint, e.g. ``https://<project>.supabase.co/rest/v1``
            api_key: Project API key
            access_token: Signed-in user's token; defaults to the API key
        """
        super().__init__(
            base_url,
            headers={
                'apikey': api_key,
                'Authorization': f"Bearer {access_token or api_key}",
                'Content-Type': 'application/json',
            },
        )
        self.set_log_context(store='rest')

    def _params(self, filters: Filters | None) -> dict[str, str]:
        return {column: _filter_value(value) for column, value in (filters or {}).items()}

    def _request_rows(
        self,
        table: str,
        operation: str,
        method: str,
        params: dict[str, str] | None = None,
        data: Row | list[Row] | None = None,
        headers: dict[str, str] | None = None
    ) -> list[Row]:
        if table not in TABLES:
            raise StoreError(f"Unknown table: {table}")
        try:
            result = self._make_request(method, table, params=params, data=data, headers=headers)
        except APIResponseError as e:
            if e.status_code == CONFLICT_STATUS:
                raise StoreConstraintError(f"Failed to {operation} {table}: {e.message}", table) from e
            raise StoreError(f"Failed to {operation} {table}: {e.message}", details={"table": table}) from e
        except APIError as e:
            raise StoreError(f"Failed to {operation} {table}: {e.message}", details={"table": table}) from e
        if result is None:
            return []
        return result if isinstance(result, list) else [result]

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False
    ) -> list[Row]:
        params = {'select': '*', **self._params(filters)}
        if order_by:
            params['order'] = f"{order_by}.{'desc' if descending else 'asc'}"
        return self._request_rows(table, 'select', "GET", params=params)

    def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        inserted = self._request_rows(
            table, 'insert', "POST", data=self._as_rows(rows), headers=self.RETURN_REPRESENTATION
        )
        for row in inserted:
            self._publish(table, 'INSERT', new=row)
        return inserted

    def upsert(self, table: str, rows: Row | list[Row], on_conflict: str = 'id') -> list[Row]:
        upserted = self._request_rows(
            table,
            'upsert',
            "POST",
            params={'on_conflict': on_conflict},
            data=self._as_rows(rows),
            headers={'Prefer': 'resolution=merge-duplicates,return=representation'},
        )
        # The response does not say which rows existed before
        for row in upserted:
            self._publish(table, 'UPDATE', new=row)
        return upserted

    def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        updated = self._request_rows(
            table, 'update', "PATCH", params=self._params(filters), data=values, headers=self.RETURN_REPRESENTATION
        )
        for row in updated:
            self._publish(table, 'UPDATE', new=row)
        return updated

    def delete(self, table: str, filters: Filters) -> list[Row]:
        deleted = self._request_rows(
            table, 'delete', "DELETE", params=self._params(filters), headers=self.RETURN_REPRESENTATION
        )
        for row in deleted:
            self._publish(table, 'DELETE', old=row)
        return deleted

    def close(self) -> None:
        RemoteStore.close(self)
        self.session.close()
