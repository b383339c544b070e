# core/services/notifier.py
"""Live count of pending requests waiting on one owner."""
import logging
import threading
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.realtime import ChangeEvent, ChangeFeed, Subscription
from core.sa.models import BorrowRequest
from core.sa.repositories import BorrowRequestRepository
from core.session import Identity, SessionContext

logger = logging.getLogger(__name__)

CountListener = Callable[[int], None]


class PendingCountNotifier:
    """Keeps ``count`` equal to the owner's pending requests.

    Recounts run on a worker thread owned by the notifier, never on the
    thread that committed the change. The worker wakes on every change to
    the borrow request table and, when ``poll_interval`` is positive, at
    least that often, so writes made through other processes are picked up
    too. Event contents are ignored. Refreshes that started before a stop
    or restart are discarded when they finish.
    """

    def __init__(self, database, feed: Optional[ChangeFeed] = None,
                 poll_interval: Optional[float] = None):
        self.database = database
        self.feed = feed or database.feed
        self.poll_interval = poll_interval if poll_interval is not None else settings.pending_count_poll_seconds
        self._lock = threading.Lock()
        self._owner_id: Optional[str] = None
        self._subscription: Optional[Subscription] = None
        self._worker: Optional[threading.Thread] = None
        self._wake: Optional[threading.Event] = None
        self._stopped: Optional[threading.Event] = None
        self._generation = 0
        self._count = 0
        self._listeners: List[CountListener] = []
        self._detach: Optional[Callable[[], None]] = None

    @property
    def count(self) -> int:
        return self._count

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def add_listener(self, listener: CountListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def start(self, owner_id: str) -> None:
        """Follow ``owner_id``. The first count is taken before returning."""
        if self._owner_id == owner_id and self.active:
            return
        self.stop()
        wake, stopped = threading.Event(), threading.Event()
        worker = threading.Thread(
            target=self._run,
            args=(wake, stopped),
            name=f"pending-count-{owner_id}",
            daemon=True
        )
        with self._lock:
            self._generation += 1
            self._owner_id = owner_id
            self._wake, self._stopped, self._worker = wake, stopped, worker
            self._subscription = self.feed.subscribe(
                BorrowRequest.__tablename__, callback=self._on_change
            )
        self.refresh()
        worker.start()

    def stop(self) -> None:
        with self._lock:
            subscription = self._subscription
            wake, stopped = self._wake, self._stopped
            self._subscription = None
            self._wake = self._stopped = self._worker = None
            self._owner_id = None
            self._generation += 1
            changed = self._count != 0
            self._count = 0
        if subscription is not None:
            subscription.unsubscribe()
        if stopped is not None:
            stopped.set()
            wake.set()
        if changed:
            self._notify(0)

    def refresh(self) -> Optional[int]:
        """Recount pending requests. Returns None if the result was discarded."""
        with self._lock:
            owner_id = self._owner_id
            generation = self._generation
        if owner_id is None:
            return None

        try:
            with self.database.get_db() as session:
                pending = BorrowRequestRepository(session).count_pending(owner_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to count pending requests for {owner_id}: {e}")
            return None

        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding stale pending count for {owner_id}")
                return None
            self._count = pending
        self._notify(pending)
        return pending

    def attach(self, context: SessionContext) -> Callable[[], None]:
        """Follow a session: start on sign-in, stop on sign-out."""

        def on_identity(identity: Optional[Identity]) -> None:
            if identity is None:
                self.stop()
            else:
                self.start(identity.id)

        unsubscribe = context.subscribe(on_identity)
        if context.current_user() is not None:
            self.start(context.current_user().id)

        def detach() -> None:
            unsubscribe()
            self._detach = None

        self._detach = detach
        return detach

    def close(self) -> None:
        self.stop()
        if self._detach is not None:
            self._detach()

    def _on_change(self, change: ChangeEvent) -> None:
        # Runs inside the writer's commit; only signal the worker
        wake = self._wake
        if wake is not None:
            wake.set()

    def _run(self, wake: threading.Event, stopped: threading.Event) -> None:
        timeout = self.poll_interval if self.poll_interval and self.poll_interval > 0 else None
        while not stopped.is_set():
            wake.wait(timeout)
            if stopped.is_set():
                break
            wake.clear()
            self.refresh()
        logger.debug("Pending count worker exiting")

    def _notify(self, count: int) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(count)
            except Exception:
                logger.exception("Pending count listener failed")
