# core/sa/repositories/__init__.py
from .profile import ProfileRepository
from .book import BookRepository
from .borrow_request import BorrowRequestRepository

__all__ = ['ProfileRepository', 'BookRepository', 'BorrowRequestRepository']
