# core/sa/repositories/borrow_request.py
from typing import List, Optional
from sqlalchemy import desc, func, select, update
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError

from core.errors import (
    DuplicateRequestError, ForbiddenError, NotFoundError,
    RequestAlreadyResolvedError, ValidationError
)
from core.realtime import ChangeType, stage_change
from core.sa.models import BorrowRequest, RequestStatus

UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError came from a unique constraint."""
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "unique" in str(error.orig).lower()


class BorrowRequestRepository:
    """Repository for the borrow request ledger."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.
        
        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def _with_relations(self):
        return self.session.query(BorrowRequest).options(
            joinedload(BorrowRequest.book),
            joinedload(BorrowRequest.requester)
        )

    def get_by_id(self, request_id: str) -> Optional[BorrowRequest]:
        """Get a borrow request by its ID, with book and requester loaded.
        
        Args:
            request_id: The ID of the borrow request
            
        Returns:
            The BorrowRequest object if found, None otherwise
        """
        return (
            self._with_relations()
            .filter(BorrowRequest.id == request_id)
            .populate_existing()
            .one_or_none()
        )

    def create_request(self, book_id: str, requester_id: str, owner_id: str) -> BorrowRequest:
        """Create a pending borrow request.
        
        Args:
            book_id: The requested book
            requester_id: Profile ID of the requester
            owner_id: Profile ID of the book's owner
            
        Returns:
            The created BorrowRequest object
            
        Raises:
            DuplicateRequestError: If the requester already requested this book
        """
        borrow_request = BorrowRequest(
            book_id=book_id,
            requester_id=requester_id,
            owner_id=owner_id,
            status=RequestStatus.PENDING
        )
        self.session.add(borrow_request)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if is_unique_violation(e):
                raise DuplicateRequestError("You have already requested this book") from e
            raise
        return borrow_request

    def list_received(self, owner_id: str) -> List[BorrowRequest]:
        """Get all requests made against an owner's books, newest first"""
        return (
            self._with_relations()
            .filter(BorrowRequest.owner_id == owner_id)
            .order_by(desc(BorrowRequest.created_at))
            .all()
        )

    def list_sent(self, requester_id: str) -> List[BorrowRequest]:
        """Get all requests a requester has made, newest first"""
        return (
            self._with_relations()
            .filter(BorrowRequest.requester_id == requester_id)
            .order_by(desc(BorrowRequest.created_at))
            .all()
        )

    def count_pending(self, owner_id: str) -> int:
        """Count pending requests waiting on an owner's decision"""
        return self.session.execute(
            select(func.count(BorrowRequest.id)).where(
                BorrowRequest.owner_id == owner_id,
                BorrowRequest.status == RequestStatus.PENDING
            )
        ).scalar_one()

    def resolve(self, request_id: str, decision: RequestStatus, acting_owner_id: str) -> BorrowRequest:
        """Move a pending request to accepted or declined.
        
        The update only matches a row that is still pending and owned by the
        acting user, so concurrent resolutions cannot overwrite each other.
        Repeating the decision already recorded is a no-op.
        
        Args:
            request_id: The ID of the borrow request
            decision: RequestStatus.ACCEPTED or RequestStatus.DECLINED
            acting_owner_id: Profile ID of the user resolving the request
            
        Returns:
            The resolved BorrowRequest object
            
        Raises:
            ValidationError: If decision is not a terminal status
            NotFoundError: If the request does not exist
            ForbiddenError: If the acting user does not own the request
            RequestAlreadyResolvedError: If the request was resolved the other way
        """
        if not decision.is_terminal:
            raise ValidationError("Decision must be 'accepted' or 'declined'")

        result = self.session.execute(
            update(BorrowRequest)
            .where(
                BorrowRequest.id == request_id,
                BorrowRequest.owner_id == acting_owner_id,
                BorrowRequest.status == RequestStatus.PENDING
            )
            .values(status=decision)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            stage_change(self.session, BorrowRequest.__tablename__, ChangeType.UPDATE, request_id)
            self.session.commit()
            return self.get_by_id(request_id)

        self.session.rollback()
        borrow_request = self.get_by_id(request_id)
        if borrow_request is None:
            raise NotFoundError("Request not found")
        if borrow_request.owner_id != acting_owner_id:
            raise ForbiddenError("Only the book's owner can resolve this request")
        if borrow_request.status == decision:
            return borrow_request
        raise RequestAlreadyResolvedError(f"Request already {borrow_request.status.value}")
