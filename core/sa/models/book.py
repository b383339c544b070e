# core/sa/models/book.py
from enum import Enum
from sqlalchemy import String, Boolean, ForeignKey, Index
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, CreatedAtMixin, new_id

class Category(str, Enum):
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SCIENCE = "Science"
    TECHNOLOGY = "Technology"
    HISTORY = "History"
    BIOGRAPHY = "Biography"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: str) -> "Category":
        """Resolve a display label such as 'Non-Fiction' to a member."""
        for member in cls:
            if member.value == label:
                return member
        raise ValueError(f"Unknown category '{label}'")

class Book(Base, CreatedAtMixin):
    __tablename__ = 'books'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    cover_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    category: Mapped[Category] = mapped_column(
        SAEnum(Category, name='book_category', native_enum=False, length=20,
               values_callable=lambda enum: [member.value for member in enum]),
        nullable=False
    )
    owner_id: Mapped[str] = mapped_column(String(36), ForeignKey('profiles.id'), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    owner = relationship('Profile', back_populates='books')
    borrow_requests = relationship('BorrowRequest', back_populates='book')

    @property
    def owner_name(self) -> str | None:
        return self.owner.full_name if self.owner else None

    __table_args__ = (
        Index('idx_books_owner_id', 'owner_id'),
        Index('idx_books_category', 'category'),
        Index('idx_books_created_at', 'created_at'),
    )
