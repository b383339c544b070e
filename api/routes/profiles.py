# api/routes/profiles.py

from typing import List
from fastapi import APIRouter, Depends

from api.dependencies import get_lending_service
from api.schemas.book import BookSchema
from api.schemas.profile import ProfileSchema
from core.services.lending import LendingService

router = APIRouter(prefix="/profiles", tags=["profiles"])

@router.get("/me", response_model=ProfileSchema)
def get_my_profile(service: LendingService = Depends(get_lending_service)):
    """Return the caller's profile, creating it on first use."""
    return service.ensure_profile()

@router.get("/me/books", response_model=List[BookSchema])
def get_my_books(service: LendingService = Depends(get_lending_service)):
    return service.list_my_books()
