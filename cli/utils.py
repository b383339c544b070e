import click
from contextlib import contextmanager
from typing import Iterator, Optional

from core.errors import LendingError
from core.sa.database import Database
from core.sa.models import Book, BorrowRequest, RequestStatus
from core.services.lending import LendingService
from core.session import Identity, SessionContext

STATUS_COLORS = {
    RequestStatus.PENDING: 'yellow',
    RequestStatus.ACCEPTED: 'green',
    RequestStatus.DECLINED: 'red',
}

database_option = click.option(
    '--database-url', '--db', default=None,
    help="SQLAlchemy database URL (defaults to DATABASE_URL)"
)

@contextmanager
def lending_service(database_url: Optional[str], user_id: Optional[str] = None) -> Iterator[LendingService]:
    """Open a LendingService acting as ``user_id`` (anonymous when None).

    Lending errors are printed and turned into a non-zero exit.
    """
    database = Database(database_url)
    context = SessionContext(Identity(id=user_id) if user_id else None)
    session = database.get_session()
    try:
        yield LendingService(session, context)
    except LendingError as e:
        raise click.ClickException(f"{e.message} ({e.code})")
    finally:
        session.close()
        database.dispose()

def print_book(book: Book) -> None:
    availability = click.style("available", fg='green') if book.is_available else click.style("borrowed", fg='red')
    click.echo(f" - {book.title} by {book.author} [{book.category.value}] {availability} (ID: {book.id})")

def print_request(request: BorrowRequest, perspective: str = 'owner') -> None:
    status = click.style(request.status.value, fg=STATUS_COLORS[request.status])
    title = request.book.title if request.book else request.book_id
    if perspective == 'owner':
        requester = request.requester.full_name if request.requester else request.requester_id
        click.echo(f" - {requester} requested \"{title}\" {status} (ID: {request.id})")
    else:
        click.echo(f" - You requested \"{title}\" {status} (ID: {request.id})")
