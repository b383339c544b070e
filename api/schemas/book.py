# api/schemas/book.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from core.sa.models import Category

class BookSchema(BaseModel):
    id: str
    title: str
    author: str
    cover_url: Optional[str] = None
    category: Category
    owner_id: str
    is_available: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class BookDetailSchema(BookSchema):
    owner_name: Optional[str] = None

class BookCreate(BaseModel):
    # Presence is checked by the service so the caller gets one clear message
    title: str = ""
    author: str = ""
    category: str = ""
    cover_url: Optional[str] = None

class BookSummary(BaseModel):
    id: str
    title: str
    author: str
    is_available: bool
    category: Category

    model_config = ConfigDict(from_attributes=True)

class ExternalBookSchema(BaseModel):
    title: str
    author: str
    cover_url: Optional[str] = None
    category: Category

    model_config = ConfigDict(from_attributes=True)
