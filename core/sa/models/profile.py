# core/sa/models/profile.py
from sqlalchemy import String
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, CreatedAtMixin

class Profile(Base, CreatedAtMixin):
    """One row per authenticated identity; the id is the identity id."""
    __tablename__ = 'profiles'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Relationships
    books = relationship('Book', back_populates='owner')
