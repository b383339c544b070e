# tests/test_repositories/test_borrow_request_repository.py
import pytest
from core.errors import (
    DuplicateRequestError, ForbiddenError, NotFoundError,
    RequestAlreadyResolvedError, ValidationError
)
from core.sa.models import BorrowRequest, RequestStatus
from core.sa.repositories import BorrowRequestRepository

@pytest.fixture
def request_repo(db_session):
    return BorrowRequestRepository(db_session)

@pytest.fixture
def pending_request(request_repo, sample_book, reader):
    return request_repo.create_request(sample_book.id, reader.id, sample_book.owner_id)

def test_create_request_is_pending(pending_request, sample_book, reader):
    assert pending_request.status == RequestStatus.PENDING
    assert pending_request.book_id == sample_book.id
    assert pending_request.requester_id == reader.id
    assert pending_request.owner_id == sample_book.owner_id

def test_duplicate_request_rejected(request_repo, db_session, pending_request, sample_book, reader):
    with pytest.raises(DuplicateRequestError) as exc_info:
        request_repo.create_request(sample_book.id, reader.id, sample_book.owner_id)

    assert exc_info.value.code == "already_requested"
    assert db_session.query(BorrowRequest).count() == 1

def test_duplicate_rejected_after_resolution(request_repo, pending_request, sample_book, reader):
    request_repo.resolve(pending_request.id, RequestStatus.ACCEPTED, sample_book.owner_id)

    with pytest.raises(DuplicateRequestError):
        request_repo.create_request(sample_book.id, reader.id, sample_book.owner_id)

def test_get_by_id_loads_book_and_requester(request_repo, pending_request):
    borrow_request = request_repo.get_by_id(pending_request.id)

    assert borrow_request.book.title == "Dune"
    assert borrow_request.requester.full_name == "Bob Reader"

def test_list_received_newest_first(request_repo, received_requests, sample_book):
    received = request_repo.list_received(sample_book.owner_id)

    assert [r.id for r in received] == [r.id for r in reversed(received_requests)]

def test_list_sent(request_repo, received_requests, requesters):
    sent = request_repo.list_sent(requesters[0].id)

    assert [r.id for r in sent] == [received_requests[0].id]
    assert request_repo.list_sent("nobody") == []

def test_count_pending(request_repo, received_requests, sample_book):
    assert request_repo.count_pending(sample_book.owner_id) == 2

    request_repo.resolve(received_requests[0].id, RequestStatus.ACCEPTED, sample_book.owner_id)

    assert request_repo.count_pending(sample_book.owner_id) == 1

def test_count_pending_other_owner(request_repo, received_requests, requesters):
    assert request_repo.count_pending(requesters[0].id) == 0

@pytest.mark.parametrize("decision", [RequestStatus.ACCEPTED, RequestStatus.DECLINED])
def test_resolve(request_repo, pending_request, sample_book, decision):
    resolved = request_repo.resolve(pending_request.id, decision, sample_book.owner_id)

    assert resolved.status == decision
    assert request_repo.get_by_id(pending_request.id).status == decision

def test_resolve_leaves_book_availability(request_repo, db_session, pending_request, sample_book):
    request_repo.resolve(pending_request.id, RequestStatus.ACCEPTED, sample_book.owner_id)

    db_session.refresh(sample_book)
    assert sample_book.is_available is True

def test_resolve_same_decision_is_noop(request_repo, pending_request, sample_book):
    request_repo.resolve(pending_request.id, RequestStatus.DECLINED, sample_book.owner_id)

    again = request_repo.resolve(pending_request.id, RequestStatus.DECLINED, sample_book.owner_id)

    assert again.status == RequestStatus.DECLINED

def test_resolve_opposite_decision_rejected(request_repo, pending_request, sample_book):
    request_repo.resolve(pending_request.id, RequestStatus.ACCEPTED, sample_book.owner_id)

    with pytest.raises(RequestAlreadyResolvedError):
        request_repo.resolve(pending_request.id, RequestStatus.DECLINED, sample_book.owner_id)

    assert request_repo.get_by_id(pending_request.id).status == RequestStatus.ACCEPTED

def test_resolve_by_non_owner_forbidden(request_repo, pending_request, reader):
    with pytest.raises(ForbiddenError):
        request_repo.resolve(pending_request.id, RequestStatus.ACCEPTED, reader.id)

    assert request_repo.get_by_id(pending_request.id).status == RequestStatus.PENDING

def test_resolve_missing_request(request_repo, owner):
    with pytest.raises(NotFoundError):
        request_repo.resolve("missing", RequestStatus.ACCEPTED, owner.id)

def test_resolve_to_pending_rejected(request_repo, pending_request, sample_book):
    with pytest.raises(ValidationError):
        request_repo.resolve(pending_request.id, RequestStatus.PENDING, sample_book.owner_id)
