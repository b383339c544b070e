import click
from core.sa.models import Category
from ..utils import database_option, lending_service, print_book

@click.group()
def books():
    """Book listing commands"""
    pass

@books.command(name="list")
@database_option
@click.option('--search', '-s', default=None, help="Text to match against title or author")
@click.option('--category', '-c', type=click.Choice([c.value for c in Category]), default=None,
              help="Only list books in this category")
def list_books(database_url, search, category):
    """List book listings, newest first."""
    with lending_service(database_url) as service:
        found = service.list_books(search=search, category=category)
        if not found:
            click.echo("\nNo books found.")
            return
        click.echo(f"\nFound {len(found)} book(s):")
        for book in found:
            print_book(book)

@books.command(name="add")
@database_option
@click.option('--owner-id', required=True, help="Identity ID of the owner")
@click.option('--title', required=True)
@click.option('--author', required=True)
@click.option('--category', type=click.Choice([c.value for c in Category]), required=True)
@click.option('--cover-url', default=None)
def add_book(database_url, owner_id, title, author, category, cover_url):
    """Add a book listing on behalf of an owner."""
    with lending_service(database_url, owner_id) as service:
        book = service.create_book(title=title, author=author, category=category, cover_url=cover_url)
        click.echo(click.style("Book added: ", fg='green') + f"{book.title} (ID: {book.id})")
