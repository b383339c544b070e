# api/schemas/request.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from core.sa.models import RequestStatus
from .book import BookSummary

class RequesterSchema(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class BorrowRequestSchema(BaseModel):
    id: str
    book_id: str
    requester_id: str
    owner_id: str
    status: RequestStatus
    created_at: datetime
    book: Optional[BookSummary] = None
    requester: Optional[RequesterSchema] = None

    model_config = ConfigDict(from_attributes=True)

class PendingCount(BaseModel):
    pending: int
