"""
Local mirrors of the owner's courses and players, kept current from store
change events.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from cardmate.models.course import Course
from cardmate.models.player import Player
from cardmate.services.auth_service import Session
from cardmate.store.base import RemoteStore
from cardmate.store.base import Row
from cardmate.store.base import Subscription
from cardmate.utils.logging_utils import EnhancedLoggerMixin

T = TypeVar('T')


@dataclass(frozen=True)
class Inserted:
    record: Row

@dataclass(frozen=True)
class Updated:
    record: Row
    old: Row = field(default_factory=dict)

@dataclass(frozen=True)
class Deleted:
    old: Row

@dataclass(frozen=True)
class Unknown:
    payload: dict[str, Any]

RemoteEvent = Inserted | Updated | Deleted | Unknown

def parse_change(payload: dict[str, Any]) -> RemoteEvent:
    """Decode a raw change payload into a typed event."""
    event_type = str(payload.get('eventType') or '').upper()
    new = payload.get('new') or {}
    old = payload.get('old') or {}
    if event_type == 'INSERT' and new:
        return Inserted(dict(new))
    if event_type == 'UPDATE' and new:
        return Updated(dict(new), dict(old))
    if event_type == 'DELETE' and old:
        return Deleted(dict(old))
    return Unknown(dict(payload))

@dataclass(frozen=True)
class MirrorState:
    """Rows of one mirrored collection.

    ``stale`` means the rows can no longer be trusted and the whole
    collection has to be fetched again.
    """
    records: tuple[Row, ...] = ()
    stale: bool = False

    @property
    def ids(self) -> list[str]:
        return [str(record.get('id')) for record in self.records]

def _merge(records: tuple[Row, ...], record: Row) -> tuple[Row, ...]:
    for index, existing in enumerate(records):
        if existing.get('id') == record['id']:
            return records[:index] + (record,) + records[index + 1:]
    return records + (record,)

def apply_remote_event(state: MirrorState, event: RemoteEvent) -> MirrorState:
    """Return the mirror state after ``event``.

    Deletions remove the row by id. Inserts and updates carrying an id are
    merged by id. Anything else marks the state stale.
    """
    if isinstance(event, Deleted) and event.old.get('id') is not None:
        return replace(state, records=tuple(r for r in state.records if r.get('id') != event.old['id']))
    if isinstance(event, (Inserted, Updated)) and event.record.get('id') is not None:
        return replace(state, records=_merge(state.records, event.record))
    return replace(state, stale=True)

class CollectionMirror(EnhancedLoggerMixin, Generic[T]):
    """Snapshot plus change subscription for one collection of one owner."""

    def __init__(self, store: RemoteStore, table: str, decode: Callable[[Row], T], order_by: str | None = None):
        super().__init__()
        self.store = store
        self.table = table
        self.decode = decode
        self.order_by = order_by
        self.owner_id: str | None = None
        self.state = MirrorState()
        self._subscription: Subscription | None = None
        self._listeners: list[Callable[[list[T]], None]] = []
        self.set_log_context(table=table)

    @property
    def items(self) -> list[T]:
        return [self.decode(record) for record in self.state.records]

    @property
    def is_active(self) -> bool:
        return self._subscription is not None

    def get(self, record_id: str) -> T | None:
        for record in self.state.records:
            if record.get('id') == record_id:
                return self.decode(record)
        return None

    def add_listener(self, listener: Callable[[list[T]], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        items = self.items
        for listener in list(self._listeners):
            listener(items)

    def start(self, owner_id: str) -> None:
        """Subscribe for ``owner_id`` and load the initial snapshot."""
        if self._subscription is not None:
            self.stop()
        self.owner_id = owner_id
        self._subscription = self.store.subscribe(self.table, self._on_change, {'user_id': owner_id})
        self.refetch()

    def stop(self) -> None:
        """Unsubscribe and clear the mirror."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self.owner_id = None
        self.state = MirrorState()
        self._notify()

    def refetch(self) -> None:
        if self.owner_id is None:
            return
        rows = self.store.select(self.table, {'user_id': self.owner_id}, order_by=self.order_by)
        self.state = MirrorState(records=tuple(rows))
        self.debug("Collection loaded", count=len(rows))
        self._notify()

    def _on_change(self, payload: dict[str, Any]) -> None:
        event = parse_change(payload)
        self.state = apply_remote_event(self.state, event)
        if self.state.stale:
            self.debug("Mirror stale, refetching", event=type(event).__name__)
            self.refetch()
        else:
            self._notify()

class SyncService(EnhancedLoggerMixin):
    """Keeps the courses and players mirrors aligned with the signed-in identity."""

    def __init__(self, store: RemoteStore, session: Session):
        super().__init__()
        self.store = store
        self.session = session
        self.courses: CollectionMirror[Course] = CollectionMirror(store, 'courses', Course.from_record, 'name')
        self.players: CollectionMirror[Player] = CollectionMirror(store, 'players', Player.from_record, 'name')
        self._remove_listener = session.add_listener(self._on_identity)
        if session.user_id:
            self._on_identity(session.user_id)

    def _on_identity(self, user_id: str | None) -> None:
        if user_id:
            self.info("Starting sync", user_id=user_id)
            self.courses.start(user_id)
            self.players.start(user_id)
        else:
            self.info("Signed out, clearing mirrors")
            self.courses.stop()
            self.players.stop()

    def refresh(self) -> None:
        self.courses.refetch()
        self.players.refetch()

    def close(self) -> None:
        self._remove_listener()
        self.courses.stop()
        self.players.stop()
