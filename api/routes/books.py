# api/routes/books.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_lending_service
from api.schemas.book import BookCreate, BookDetailSchema, BookSchema
from api.schemas.request import BorrowRequestSchema
from core.services.lending import LendingService

router = APIRouter(prefix="/books", tags=["books"])

@router.get("", response_model=List[BookSchema])
def get_books(
    search: Optional[str] = Query(None, description="Search books by title or author"),
    category: Optional[str] = Query(None, description="Filter books by category"),
    service: LendingService = Depends(get_lending_service)
):
    """
    Get every listing matching the search text and category, newest first.
    
    Args:
        search: Optional case-insensitive text matched against title and author
        category: Optional exact category
        service: Lending service for the caller's session
    
    Returns:
        List of books; the list is not paginated
    """
    return service.list_books(search=search, category=category)

@router.get("/{book_id}", response_model=BookDetailSchema)
def get_book(book_id: str, service: LendingService = Depends(get_lending_service)):
    """Get a single book with its owner's name."""
    return service.get_book(book_id)

@router.post("", response_model=BookSchema, status_code=status.HTTP_201_CREATED)
def create_book(book: BookCreate, service: LendingService = Depends(get_lending_service)):
    """List a new book owned by the caller. Creates the caller's profile if needed."""
    return service.create_book(
        title=book.title,
        author=book.author,
        category=book.category,
        cover_url=book.cover_url
    )

@router.post("/{book_id}/requests", response_model=BorrowRequestSchema, status_code=status.HTTP_201_CREATED)
def request_book(book_id: str, service: LendingService = Depends(get_lending_service)):
    """
    Ask to borrow a book.
    
    Returns 400 when the caller owns the book and 409 when the caller has
    already requested it.
    """
    book = service.get_book(book_id)
    return service.request_book(book)
