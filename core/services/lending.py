# core/services/lending.py
"""Lending operations for one client session.

Routes and commands call these methods instead of touching repositories, so
validation, authorization preconditions and error conversion live in one
place. Storage failures are rolled back and surface as ``StorageError``.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import (
    DuplicateRequestError, LendingError, NotFoundError,
    ProfileSetupError, SelfBorrowError, StorageError, ValidationError
)
from core.sa.models import Book, BorrowRequest, Category, Profile, RequestStatus
from core.sa.repositories import BookRepository, BorrowRequestRepository, ProfileRepository
from core.session import SessionContext
from core.utils.google_books import ExternalBook, GoogleBooksClient

logger = logging.getLogger(__name__)


def parse_category(value: Union[str, Category, None]) -> Optional[Category]:
    if value is None or value == "":
        return None
    if isinstance(value, Category):
        return value
    try:
        return Category.from_label(value)
    except ValueError:
        raise ValidationError(f"Unknown category '{value}'")


def parse_decision(value: Union[str, RequestStatus]) -> RequestStatus:
    try:
        decision = RequestStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown decision '{value}'")
    if not decision.is_terminal:
        raise ValidationError("Decision must be 'accepted' or 'declined'")
    return decision


class LendingService:
    def __init__(self, session: Session, context: SessionContext,
                 catalog: Optional[GoogleBooksClient] = None):
        self.session = session
        self.context = context
        self.catalog = catalog or GoogleBooksClient()
        self.profiles = ProfileRepository(session)
        self.books = BookRepository(session)
        self.requests = BorrowRequestRepository(session)

    @contextmanager
    def _storage(self, action: str) -> Iterator[None]:
        try:
            yield
        except LendingError:
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Storage failure while trying to {action}: {e}")
            reason = str(getattr(e, "orig", None) or e)
            raise StorageError(reason) from e

    # Profile directory

    def ensure_profile(self) -> Profile:
        identity = self.context.require_user()
        try:
            return self.profiles.ensure_profile(identity)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating profile for {identity.id}: {e}")
            raise ProfileSetupError("Error setting up user profile") from e

    # Book catalog

    def list_books(self, search: Optional[str] = None,
                   category: Union[str, Category, None] = None) -> List[Book]:
        parsed = parse_category(category)
        # Matched as a literal substring; blank means no text filter
        if search is not None and not search.strip():
            search = None
        with self._storage("list books"):
            return self.books.list_books(search=search, category=parsed)

    def get_book(self, book_id: str) -> Book:
        with self._storage("load book"):
            book = self.books.get_by_id(book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def list_my_books(self) -> List[Book]:
        identity = self.context.require_user()
        with self._storage("list own books"):
            return self.books.list_by_owner(identity.id)

    def create_book(self, title: str, author: str, category: Union[str, Category, None],
                    cover_url: Optional[str] = None) -> Book:
        identity = self.context.require_user()
        title = (title or "").strip()
        author = (author or "").strip()
        if not title or not author or not category:
            raise ValidationError("Title, author, and category are required")
        parsed = parse_category(category)

        self.ensure_profile()
        with self._storage("add book"):
            book = self.books.create_book(
                title=title,
                author=author,
                category=parsed,
                owner_id=identity.id,
                cover_url=(cover_url or "").strip() or None
            )
        logger.info(f"Book {book.id} '{book.title}' listed by {identity.id}")
        return book

    def search_external_catalog(self, query: str) -> Optional[ExternalBook]:
        return self.catalog.lookup(query)

    # Borrow request ledger

    def request_book(self, book: Book) -> BorrowRequest:
        identity = self.context.require_user()
        if book.owner_id == identity.id:
            raise SelfBorrowError("You cannot request your own book")

        self.ensure_profile()
        try:
            with self._storage("request book"):
                borrow_request = self.requests.create_request(
                    book_id=book.id,
                    requester_id=identity.id,
                    owner_id=book.owner_id
                )
                borrow_request = self.requests.get_by_id(borrow_request.id)
        except DuplicateRequestError:
            logger.warning(f"Duplicate request for book {book.id} by {identity.id}")
            raise
        logger.info(f"Request {borrow_request.id} created for book {book.id} by {identity.id}")
        return borrow_request

    def list_received(self) -> List[BorrowRequest]:
        identity = self.context.require_user()
        with self._storage("load received requests"):
            return self.requests.list_received(identity.id)

    def list_sent(self) -> List[BorrowRequest]:
        identity = self.context.require_user()
        with self._storage("load sent requests"):
            return self.requests.list_sent(identity.id)

    def resolve_request(self, request_id: str, decision: Union[str, RequestStatus]) -> BorrowRequest:
        identity = self.context.require_user()
        parsed = parse_decision(decision)
        with self._storage("update request"):
            borrow_request = self.requests.resolve(request_id, parsed, identity.id)
        logger.info(f"Request {request_id} {borrow_request.status.value} by {identity.id}")
        return borrow_request

    def pending_count(self) -> int:
        identity = self.context.require_user()
        with self._storage("count pending requests"):
            return self.requests.count_pending(identity.id)


class ProfileDashboard:
    """Local view of the signed-in user's books and requests."""

    def __init__(self, service: LendingService):
        self.service = service
        self.my_books: List[Book] = []
        self.received: List[BorrowRequest] = []
        self.sent: List[BorrowRequest] = []
        self.loading = False
        self.last_error: Optional[LendingError] = None
        self.closed = False
        self._generation = 0

    def load(self) -> bool:
        """Fetch all three lists.

        On failure the previous lists are kept. A load that is overtaken by a
        newer load or by ``close()`` discards its results and returns False.
        """
        if self.closed:
            return False
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            my_books = self.service.list_my_books()
            received = self.service.list_received()
            sent = self.service.list_sent()
        except LendingError as e:
            if generation == self._generation:
                self.last_error = e
            logger.error(f"Failed to load profile data: {e.message}")
            return False
        finally:
            if generation == self._generation:
                self.loading = False
        if generation != self._generation:
            logger.debug("Discarding stale profile data")
            return False
        self.my_books, self.received, self.sent = my_books, received, sent
        self.last_error = None
        return True

    def pending_received(self) -> List[BorrowRequest]:
        return [r for r in self.received if r.status == RequestStatus.PENDING]

    def resolved_received(self) -> List[BorrowRequest]:
        return [r for r in self.received if r.status != RequestStatus.PENDING]

    def resolve(self, request_id: str, decision: Union[str, RequestStatus]) -> BorrowRequest:
        """Resolve a request, then swap in the confirmed row by id."""
        confirmed = self.service.resolve_request(request_id, decision)
        if self.closed:
            return confirmed
        self.received = [confirmed if r.id == confirmed.id else r for r in self.received]
        return confirmed

    def close(self) -> None:
        """Stop applying results; in-flight loads are discarded."""
        self.closed = True
        self._generation += 1
        self.loading = False
