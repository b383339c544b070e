# core/sa/models/__init__.py
from .base import Base, CreatedAtMixin, new_id
from .profile import Profile
from .book import Book, Category
from .borrow_request import BorrowRequest, RequestStatus

__all__ = [
    'Base',
    'CreatedAtMixin',
    'new_id',
    'Profile',
    'Book',
    'Category',
    'BorrowRequest',
    'RequestStatus'
]
