# tests/conftest.py
import os
import sys
import time
import pytest
from pathlib import Path
from datetime import datetime, UTC, timedelta
from unittest.mock import Mock
from sqlalchemy.orm import Session
from sqlalchemy.sql import text

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.sa.database import Database
from core.sa.models import Profile, Book, BorrowRequest, Category, RequestStatus
from core.services.lending import LendingService
from core.session import Identity, SessionContext
from core.utils.google_books import GoogleBooksClient

OWNER_ID = "owner-1"
READER_ID = "reader-1"

@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_bookshare.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")
    
    # Drop all tables and recreate schema
    db.drop_db()
    db.init_db()
    
    yield db
    
    db.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass  # Ignore errors if file doesn't exist

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(autouse=True)
def cleanup_db(db_session):
    """Clean up database tables before each test"""
    # Delete all data from tables in reverse order of dependencies
    db_session.execute(text("DELETE FROM borrow_requests"))
    db_session.execute(text("DELETE FROM books"))
    db_session.execute(text("DELETE FROM profiles"))
    db_session.commit()
    yield
    db_session.rollback()

@pytest.fixture
def owner_identity():
    return Identity(id=OWNER_ID, email="alice@example.com", full_name="Alice Owner")

@pytest.fixture
def reader_identity():
    return Identity(id=READER_ID, email="bob@example.com", full_name="Bob Reader")

@pytest.fixture
def owner(db_session, owner_identity):
    """Create the profile of a book owner."""
    profile = Profile(id=owner_identity.id, email=owner_identity.email, full_name=owner_identity.full_name)
    db_session.add(profile)
    db_session.commit()
    return profile

@pytest.fixture
def reader(db_session, reader_identity):
    """Create the profile of a would-be borrower."""
    profile = Profile(id=reader_identity.id, email=reader_identity.email, full_name=reader_identity.full_name)
    db_session.add(profile)
    db_session.commit()
    return profile

@pytest.fixture
def sample_book(db_session, owner):
    """Create a sample book owned by ``owner``."""
    book = Book(
        title="Dune",
        author="Frank Herbert",
        category=Category.SCIENCE,
        owner_id=owner.id,
        cover_url="https://example.com/dune.jpg"
    )
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def multiple_books(db_session, owner):
    """Create books with distinct, increasing created_at values."""
    now = datetime.now(UTC)
    specs = [
        ("Dune", "Frank Herbert", Category.SCIENCE),
        ("A Brief History of Time", "Stephen Hawking", Category.SCIENCE),
        ("The Hobbit", "J.R.R. Tolkien", Category.FICTION),
        ("Steve Jobs", "Walter Isaacson", Category.BIOGRAPHY),
        ("Sapiens", "Yuval Noah Harari", Category.HISTORY),
    ]
    books = []
    for i, (title, author, category) in enumerate(specs):
        book = Book(
            title=title,
            author=author,
            category=category,
            owner_id=owner.id,
            created_at=now - timedelta(minutes=len(specs) - i)
        )
        db_session.add(book)
        books.append(book)
    db_session.commit()
    return books

@pytest.fixture
def requesters(db_session):
    """Create three borrower profiles."""
    profiles = [Profile(id=f"reader-{i}", email=f"reader{i}@example.com", full_name=f"Reader {i}") for i in range(2, 5)]
    db_session.add_all(profiles)
    db_session.commit()
    return profiles

@pytest.fixture
def received_requests(db_session, sample_book, requesters):
    """Three requests against ``sample_book`` with statuses pending, pending, accepted."""
    now = datetime.now(UTC)
    statuses = [RequestStatus.PENDING, RequestStatus.PENDING, RequestStatus.ACCEPTED]
    requests = []
    for i, (requester, status) in enumerate(zip(requesters, statuses)):
        borrow_request = BorrowRequest(
            book_id=sample_book.id,
            requester_id=requester.id,
            owner_id=sample_book.owner_id,
            status=status,
            created_at=now - timedelta(minutes=len(statuses) - i)
        )
        db_session.add(borrow_request)
        requests.append(borrow_request)
    db_session.commit()
    return requests

@pytest.fixture
def catalog():
    """A GoogleBooksClient stand-in that never touches the network."""
    client = Mock(spec=GoogleBooksClient)
    client.lookup.return_value = None
    return client

@pytest.fixture
def make_service(db_session, catalog):
    """Build a LendingService for an identity (anonymous when None)."""
    def factory(identity=None):
        return LendingService(db_session, SessionContext(identity), catalog=catalog)
    return factory

@pytest.fixture
def wait_until():
    """Poll a predicate until it holds or the timeout expires."""
    def waiter(predicate, timeout=3.0, interval=0.01):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()
    return waiter
