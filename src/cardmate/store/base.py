"""
Relational store contract shared by the local and hosted backends.

Rows are plain dictionaries. Filters are equality matches on columns. Every
write a store performs is published to subscribers of that table as a change
payload shaped like the hosted backend's realtime feed::

    {"table": "players", "eventType": "INSERT", "new": {...}, "old": {}}
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from cardmate.utils.logging_utils import LoggerMixin

Row = dict[str, Any]
Filters = dict[str, Any]
ChangeCallback = Callable[[dict[str, Any]], None]

TABLES = ('profiles', 'courses', 'players', 'scorecards', 'scorecard_players')

def matches(row: Row, filters: Filters | None) -> bool:
    """True when ``row`` satisfies every equality filter."""
    if not filters:
        return True
    return all(row.get(column) == value for column, value in filters.items())

class Subscription:
    """Handle returned by :meth:`RemoteStore.subscribe`."""

    def __init__(self, store: "RemoteStore", table: str, callback: ChangeCallback, filters: Filters | None):
        self.store = store
        self.table = table
        self.callback = callback
        self.filters = dict(filters or {})
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.store._remove_subscription(self)

    def deliver(self, payload: dict[str, Any]) -> None:
        if not self.active:
            return
        # A delete only carries the old row; an update is relevant if either side matches
        if matches(payload.get('new') or {}, self.filters) or matches(payload.get('old') or {}, self.filters):
            self.callback(payload)

class RemoteStore(LoggerMixin, ABC):
    """CRUD plus per-table change subscriptions."""

    def __init__(self) -> None:
        super().__init__()
        self._subscriptions: list[Subscription] = []

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False
    ) -> list[Row]:
        """Fetch rows matching ``filters``."""

    @abstractmethod
    def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        """Insert one or more rows; returns the stored rows."""

    @abstractmethod
    def upsert(self, table: str, rows: Row | list[Row], on_conflict: str = 'id') -> list[Row]:
        """Insert rows or merge them into existing rows sharing ``on_conflict``."""

    @abstractmethod
    def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        """Update matching rows; returns the updated rows."""

    @abstractmethod
    def delete(self, table: str, filters: Filters) -> list[Row]:
        """Delete matching rows; returns the deleted rows."""

    def subscribe(self, table: str, callback: ChangeCallback, filters: Filters | None = None) -> Subscription:
        """Register ``callback`` for change payloads on ``table``."""
        subscription = Subscription(self, table, callback, filters)
        self._subscriptions.append(subscription)
        self.debug("Subscribed to changes", table=table, filters=filters)
        return subscription

    def _remove_subscription(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            self.debug("Unsubscribed from changes", table=subscription.table)

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def _publish(self, table: str, event_type: str, new: Row | None = None, old: Row | None = None) -> None:
        """Deliver a change payload to the table's subscribers."""
        payload = {
            'table': table,
            'eventType': event_type,
            'new': dict(new or {}),
            'old': dict(old or {}),
        }
        for subscription in [s for s in self._subscriptions if s.table == table]:
            subscription.deliver(payload)

    @staticmethod
    def _as_rows(rows: Row | list[Row]) -> list[Row]:
        return [rows] if isinstance(rows, dict) else list(rows)

    def close(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()
