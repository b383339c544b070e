import click
from core.sa.models import RequestStatus
from ..utils import database_option, lending_service, print_request

@click.group()
def requests():
    """Borrow request commands"""
    pass

@requests.command(name="received")
@database_option
@click.argument('owner_id')
def received(database_url, owner_id):
    """List requests made against OWNER_ID's books."""
    with lending_service(database_url, owner_id) as service:
        found = service.list_received()
        pending = sum(1 for r in found if r.status == RequestStatus.PENDING)
        click.echo(f"\n{len(found)} request(s), {pending} pending:")
        for request in found:
            print_request(request, perspective='owner')

@requests.command(name="sent")
@database_option
@click.argument('requester_id')
def sent(database_url, requester_id):
    """List requests REQUESTER_ID has made."""
    with lending_service(database_url, requester_id) as service:
        found = service.list_sent()
        if not found:
            click.echo("\nNo requests yet.")
            return
        for request in found:
            print_request(request, perspective='requester')

@requests.command(name="resolve")
@database_option
@click.argument('request_id')
@click.argument('decision', type=click.Choice([RequestStatus.ACCEPTED.value, RequestStatus.DECLINED.value]))
@click.option('--owner-id', required=True, help="Identity ID of the book's owner")
def resolve(database_url, request_id, decision, owner_id):
    """Accept or decline REQUEST_ID."""
    with lending_service(database_url, owner_id) as service:
        request = service.resolve_request(request_id, decision)
        click.echo(f"Request {request.id} is now {request.status.value}")
