# tests/test_cli/test_commands.py
import pytest
from click.testing import CliRunner
from unittest.mock import patch

from cli.main import cli
from core.sa.models import Category
from core.utils.google_books import ExternalBook, GoogleBooksClient

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def db_args(test_db_path, database):
    return ["--db", f"sqlite:///{test_db_path}"]

def test_add_and_list_books(runner, db_args):
    result = runner.invoke(cli, ["books", "add", *db_args, "--owner-id", "owner-1",
                                 "--title", "Dune", "--author", "Frank Herbert", "--category", "Science"])
    assert result.exit_code == 0, result.output
    assert "Book added: Dune" in result.output

    result = runner.invoke(cli, ["books", "list", *db_args, "--search", "dune"])
    assert result.exit_code == 0
    assert "Found 1 book(s)" in result.output
    assert "Dune by Frank Herbert [Science] available" in result.output

def test_list_books_empty(runner, db_args):
    result = runner.invoke(cli, ["books", "list", *db_args])

    assert result.exit_code == 0
    assert "No books found." in result.output

def test_add_book_unknown_category(runner, db_args):
    result = runner.invoke(cli, ["books", "add", *db_args, "--owner-id", "owner-1",
                                 "--title", "Dune", "--author", "Frank Herbert", "--category", "Poetry"])

    assert result.exit_code == 2

def test_received_and_resolve(runner, db_args, received_requests, sample_book):
    result = runner.invoke(cli, ["requests", "received", *db_args, sample_book.owner_id])
    assert result.exit_code == 0
    assert "3 request(s), 2 pending" in result.output

    result = runner.invoke(cli, ["requests", "resolve", *db_args, received_requests[0].id,
                                 "declined", "--owner-id", sample_book.owner_id])
    assert result.exit_code == 0
    assert f"Request {received_requests[0].id} is now declined" in result.output

def test_resolve_missing_request(runner, db_args, owner):
    result = runner.invoke(cli, ["requests", "resolve", *db_args, "missing", "accepted", "--owner-id", owner.id])

    assert result.exit_code == 1
    assert "Request not found (not_found)" in result.output

def test_sent_empty(runner, db_args):
    result = runner.invoke(cli, ["requests", "sent", *db_args, "reader-1"])

    assert result.exit_code == 0
    assert "No requests yet." in result.output

def test_catalog_lookup(runner, db_args):
    found = ExternalBook(title="Dune", author="Frank Herbert", cover_url=None, category=Category.FICTION)
    with patch.object(GoogleBooksClient, "lookup", return_value=found):
        result = runner.invoke(cli, ["catalog", "lookup", *db_args, "dune"])

    assert result.exit_code == 0
    assert "title: Dune" in result.output
    assert "category: Fiction" in result.output
