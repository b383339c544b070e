# core/sa/repositories/book.py
from typing import Optional, List
from sqlalchemy import desc, or_
from sqlalchemy.orm import Session, joinedload
from ..models import Book, Category

class BookRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Get a book by its ID with the owner profile loaded"""
        return (
            self.session.query(Book)
            .options(joinedload(Book.owner))
            .filter(Book.id == book_id)
            .one_or_none()
        )

    def list_books(
        self,
        search: Optional[str] = None,
        category: Optional[Category] = None
    ) -> List[Book]:
        """List books matching an optional text search and category, newest first.
        
        Args:
            search: Case-insensitive substring matched against title or author
            category: Exact category to filter by
            
        Returns:
            The full list of matching Book objects
        """
        base_query = self.session.query(Book)

        if search:
            base_query = base_query.filter(
                or_(
                    Book.title.icontains(search, autoescape=True),
                    Book.author.icontains(search, autoescape=True)
                )
            )

        if category:
            base_query = base_query.filter(Book.category == category)

        return base_query.order_by(desc(Book.created_at)).all()

    def list_by_owner(self, owner_id: str) -> List[Book]:
        """Get all books listed by one owner, newest first"""
        return (
            self.session.query(Book)
            .filter(Book.owner_id == owner_id)
            .order_by(desc(Book.created_at))
            .all()
        )

    def create_book(
        self,
        title: str,
        author: str,
        category: Category,
        owner_id: str,
        cover_url: Optional[str] = None
    ) -> Book:
        """Create a new, available book listing.
        
        Args:
            title: The title of the book
            author: The author of the book
            category: One of the fixed categories
            owner_id: Profile ID of the owner
            cover_url: Optional cover image URL
            
        Returns:
            The created Book object
        """
        book = Book(
            title=title,
            author=author,
            category=category,
            owner_id=owner_id,
            cover_url=cover_url,
            is_available=True
        )
        self.session.add(book)
        self.session.commit()
        return book
