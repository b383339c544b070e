# cli/main.py
import logging
import click
from core.config import settings
from core.sa.database import Database
from .commands import books, requests, catalog
from .utils import database_option

@click.group()
@click.option('--verbose', '-v', is_flag=True, help="Show debug logging")
def cli(verbose):
    """BookShare operator CLI"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

@cli.command(name="init-db")
@database_option
def init_db(database_url):
    """Create the BookShare tables."""
    database = Database(database_url)
    database.init_db()
    database.dispose()
    click.echo(click.style("Database initialized", fg='green'))

cli.add_command(books)
cli.add_command(requests)
cli.add_command(catalog)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
