# core/realtime.py
"""In-process change feed for committed row changes.

Changes are collected while a session flushes and published only once the
surrounding transaction commits, so subscribers never hear about writes that
were rolled back. Events carry no row content: consumers are expected to
re-query whatever they derive from the table.
"""
import logging
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_PENDING_KEY = "change_feed.pending"
_CLOSED = object()


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    type: ChangeType
    record_id: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


def stage_change(session: Session, table: str, change_type: ChangeType, record_id: Optional[str] = None) -> None:
    """Queue a change on the session to be published after its next commit.

    Flushed ORM objects are staged automatically; this is for statements that
    bypass the unit of work, such as bulk ``UPDATE``.
    """
    session.info.setdefault(_PENDING_KEY, []).append(
        ChangeEvent(table=table, type=change_type, record_id=record_id)
    )


class Subscription:
    """A live, non-restartable stream of change events for one table.

    Iterating blocks until the next event arrives and stops after
    ``unsubscribe()``. When a callback is given, events are handed to it
    synchronously at publish time instead of being buffered.
    """

    def __init__(
        self,
        feed: "ChangeFeed",
        table: str,
        event_types: Optional[Iterable[ChangeType]] = None,
        callback: Optional[Callable[[ChangeEvent], None]] = None,
    ):
        self.table = table
        self.event_types = frozenset(event_types) if event_types else frozenset(ChangeType)
        self.callback = callback
        self._feed = feed
        self._queue: "queue.Queue" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def matches(self, change: ChangeEvent) -> bool:
        return change.table == self.table and change.type in self.event_types

    def deliver(self, change: ChangeEvent) -> None:
        if self._closed:
            return
        if self.callback is None:
            self._queue.put(change)
            return
        try:
            self.callback(change)
        except Exception:
            logger.exception("Change listener for table %s failed", self.table)

    def next_event(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Wait for the next event; None on timeout or once unsubscribed."""
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

    def __iter__(self) -> Iterator[ChangeEvent]:
        return self

    def __next__(self) -> ChangeEvent:
        item = self._queue.get()
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            raise StopIteration
        return item

    def unsubscribe(self) -> bool:
        """Release the subscription. Returns False if it was already released."""
        with self._lock:
            if self._closed:
                logger.debug("Subscription to %s already released", self.table)
                return False
            self._closed = True
        self._feed._remove(self)
        self._queue.put(_CLOSED)
        logger.info("Unsubscribed from %s changes", self.table)
        return True

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unsubscribe()


class ChangeFeed:
    """Fans committed changes out to table subscriptions."""

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def attach(self, session_factory) -> None:
        """Hook the feed into every session produced by ``session_factory``."""
        event.listen(session_factory, "after_flush", self._after_flush)
        event.listen(session_factory, "after_commit", self._after_commit)
        event.listen(session_factory, "after_rollback", self._after_rollback)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(
        self,
        table: str,
        event_types: Optional[Iterable[ChangeType]] = None,
        callback: Optional[Callable[[ChangeEvent], None]] = None,
    ) -> Subscription:
        subscription = Subscription(self, table, event_types, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.info("Subscribed to %s changes", table)
        return subscription

    def publish(self, change: ChangeEvent) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            if subscription.matches(change):
                subscription.deliver(change)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def _after_flush(self, session: Session, flush_context) -> None:
        for change_type, objects in (
            (ChangeType.INSERT, session.new),
            (ChangeType.UPDATE, [obj for obj in session.dirty if session.is_modified(obj)]),
            (ChangeType.DELETE, session.deleted),
        ):
            for obj in objects:
                table = getattr(obj, "__tablename__", None)
                if table:
                    stage_change(session, table, change_type, getattr(obj, "id", None))

    def _after_commit(self, session: Session) -> None:
        for change in session.info.pop(_PENDING_KEY, []):
            self.publish(change)

    def _after_rollback(self, session: Session) -> None:
        session.info.pop(_PENDING_KEY, None)
