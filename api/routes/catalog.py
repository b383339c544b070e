# api/routes/catalog.py

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_lending_service
from api.schemas.book import ExternalBookSchema
from core.services.lending import LendingService

router = APIRouter(prefix="/catalog", tags=["catalog"])

@router.get("/lookup", response_model=ExternalBookSchema)
def lookup_book(
    q: str = Query(..., min_length=1, description="Free-text title, author or ISBN"),
    service: LendingService = Depends(get_lending_service)
):
    """Prefill listing details from the public book index."""
    found = service.search_external_catalog(q)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No books found")
    return found
