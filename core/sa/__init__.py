# core/sa/__init__.py
from .database import Database
from .models import (
    Base, Profile, Book, Category,
    BorrowRequest, RequestStatus
)

__all__ = [
    'Database',
    'Base',
    'Profile',
    'Book',
    'Category',
    'BorrowRequest',
    'RequestStatus'
]
