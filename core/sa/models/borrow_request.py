# core/sa/models/borrow_request.py
from enum import Enum
from sqlalchemy import String, ForeignKey, Index, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, CreatedAtMixin, new_id

class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING

class BorrowRequest(Base, CreatedAtMixin):
    __tablename__ = 'borrow_requests'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    book_id: Mapped[str] = mapped_column(String(36), ForeignKey('books.id'), nullable=False)
    requester_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False)
    # Copied from books.owner_id at insert time
    owner_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        SAEnum(RequestStatus, name='borrow_request_status', native_enum=False, length=20,
               values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
        default=RequestStatus.PENDING
    )

    # Relationships
    book = relationship('Book', back_populates='borrow_requests')
    requester = relationship('Profile', foreign_keys=[requester_id])
    owner = relationship('Profile', foreign_keys=[owner_id])

    __table_args__ = (
        UniqueConstraint('book_id', 'requester_id', name='uix_borrow_requests_book_requester'),
        Index('idx_borrow_requests_owner_id', 'owner_id'),
        Index('idx_borrow_requests_requester_id', 'requester_id'),
        Index('idx_borrow_requests_status', 'status'),
    )
