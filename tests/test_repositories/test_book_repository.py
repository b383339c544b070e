# tests/test_repositories/test_book_repository.py
import pytest
from core.sa.models import Book, Category
from core.sa.repositories import BookRepository

@pytest.fixture
def book_repo(db_session):
    return BookRepository(db_session)

def test_create_book(book_repo, owner):
    book = book_repo.create_book(
        title="Dune",
        author="Frank Herbert",
        category=Category.SCIENCE,
        owner_id=owner.id
    )

    assert book.id is not None
    assert book.is_available is True
    assert book.cover_url is None
    assert book.created_at is not None

def test_get_by_id_includes_owner_name(book_repo, sample_book):
    book = book_repo.get_by_id(sample_book.id)

    assert book.title == "Dune"
    assert book.owner_name == "Alice Owner"

def test_get_by_id_missing(book_repo):
    assert book_repo.get_by_id("does-not-exist") is None

def test_list_books_newest_first(book_repo, multiple_books):
    books = book_repo.list_books()

    assert [b.title for b in books] == [b.title for b in reversed(multiple_books)]

def test_list_books_search_matches_title_case_insensitively(book_repo, multiple_books):
    books = book_repo.list_books(search="dUnE")

    assert [b.title for b in books] == ["Dune"]

def test_list_books_search_matches_author(book_repo, multiple_books):
    books = book_repo.list_books(search="tolkien")

    assert [b.title for b in books] == ["The Hobbit"]

def test_list_books_filters_by_category(book_repo, multiple_books):
    books = book_repo.list_books(category=Category.SCIENCE)

    assert {b.title for b in books} == {"Dune", "A Brief History of Time"}

def test_list_books_search_and_category_intersect(book_repo, multiple_books):
    assert [b.title for b in book_repo.list_books(search="history", category=Category.SCIENCE)] == [
        "A Brief History of Time"
    ]
    assert book_repo.list_books(search="history", category=Category.HISTORY) == []

def test_list_books_search_treats_wildcards_literally(book_repo, multiple_books):
    assert book_repo.list_books(search="%") == []
    assert book_repo.list_books(search="_") == []

def test_list_books_no_match(book_repo, multiple_books):
    assert book_repo.list_books(search="nonexistent") == []

def test_list_by_owner(book_repo, db_session, multiple_books, reader):
    db_session.add(Book(title="Emma", author="Jane Austen", category=Category.FICTION, owner_id=reader.id))
    db_session.commit()

    owned = book_repo.list_by_owner(reader.id)

    assert [b.title for b in owned] == ["Emma"]
    assert len(book_repo.list_by_owner(multiple_books[0].owner_id)) == len(multiple_books)

def test_list_books_search_folds_accented_case(book_repo, db_session, owner):
    db_session.add(Book(title="Álgebra Lineal", author="Émile Zola", category=Category.SCIENCE, owner_id=owner.id))
    db_session.commit()

    assert [b.title for b in book_repo.list_books(search="lineal")] == ["Álgebra Lineal"]
    assert [b.title for b in book_repo.list_books(search="álgebra")] == ["Álgebra Lineal"]
    assert [b.title for b in book_repo.list_books(search="ÁLGEBRA")] == ["Álgebra Lineal"]
    assert [b.title for b in book_repo.list_books(search="émile")] == ["Álgebra Lineal"]
