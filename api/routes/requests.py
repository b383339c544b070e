# api/routes/requests.py

from typing import List
from fastapi import APIRouter, Depends

from api.dependencies import get_lending_service
from api.schemas.request import BorrowRequestSchema, PendingCount
from core.sa.models import RequestStatus
from core.services.lending import LendingService

router = APIRouter(prefix="/requests", tags=["requests"])

@router.get("/received", response_model=List[BorrowRequestSchema])
def get_received_requests(service: LendingService = Depends(get_lending_service)):
    """Requests made against the caller's books, newest first."""
    return service.list_received()

@router.get("/sent", response_model=List[BorrowRequestSchema])
def get_sent_requests(service: LendingService = Depends(get_lending_service)):
    """Requests the caller has made, newest first."""
    return service.list_sent()

@router.get("/pending-count", response_model=PendingCount)
def get_pending_count(service: LendingService = Depends(get_lending_service)):
    return PendingCount(pending=service.pending_count())

@router.post("/{request_id}/accept", response_model=BorrowRequestSchema)
def accept_request(request_id: str, service: LendingService = Depends(get_lending_service)):
    return service.resolve_request(request_id, RequestStatus.ACCEPTED)

@router.post("/{request_id}/decline", response_model=BorrowRequestSchema)
def decline_request(request_id: str, service: LendingService = Depends(get_lending_service)):
    return service.resolve_request(request_id, RequestStatus.DECLINED)
