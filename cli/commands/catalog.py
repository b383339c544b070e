import click
from ..utils import lending_service, database_option

@click.group()
def catalog():
    """External book metadata commands"""
    pass

@catalog.command(name="lookup")
@database_option
@click.argument('query')
def lookup(database_url, query):
    """Look up QUERY in the public book index."""
    with lending_service(database_url) as service:
        found = service.search_external_catalog(query)
    if found is None:
        click.echo(click.style("No books found", fg='yellow'))
        return
    for key, value in found.to_dict().items():
        click.echo(f"{key}: {value or ''}")
