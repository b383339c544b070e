# core/sa/models/base.py
import uuid
from datetime import datetime, UTC
from sqlalchemy.orm import DeclarativeBase, mapped_column, Mapped
from sqlalchemy import DateTime

def new_id() -> str:
    """Generate a primary key in the same shape the identity provider uses."""
    return str(uuid.uuid4())

class Base(DeclarativeBase):
    """Base class for all models"""
    pass

class CreatedAtMixin:
    """Mixin to add an immutable created_at column"""
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
