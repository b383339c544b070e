# api/dependencies.py
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.services.lending import LendingService
from core.session import Identity, SessionContext
from core.utils.google_books import GoogleBooksClient

def get_identity(
    x_user_id: Optional[str] = Header(None, description="Identity ID issued by the auth provider"),
    x_user_email: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
    x_user_avatar: Optional[str] = Header(None)
) -> Optional[Identity]:
    """Read the identity forwarded by the upstream auth provider, if any."""
    if not x_user_id:
        return None
    return Identity(
        id=x_user_id,
        email=x_user_email,
        full_name=x_user_name,
        avatar_url=x_user_avatar
    )

def get_session_context(identity: Optional[Identity] = Depends(get_identity)) -> SessionContext:
    return SessionContext(identity)

def get_catalog() -> GoogleBooksClient:
    return GoogleBooksClient()

def get_lending_service(
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
    catalog: GoogleBooksClient = Depends(get_catalog)
) -> LendingService:
    return LendingService(db, context, catalog)
