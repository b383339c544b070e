# core/sa/repositories/profile.py
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from core.sa.models import Profile

class ProfileRepository:
    """Repository for managing Profile entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.
        
        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        """Get a profile by its identity ID.
        
        Args:
            profile_id: The identity ID the profile belongs to
            
        Returns:
            The Profile object if found, None otherwise
        """
        return self.session.query(Profile).filter(Profile.id == profile_id).one_or_none()

    def ensure_profile(self, identity) -> Profile:
        """Return the profile for an identity, creating it on first use.
        
        Args:
            identity: Object exposing id, email, display_name and avatar_url
            
        Returns:
            The existing or newly created Profile object
        """
        existing = self.get_by_id(identity.id)
        if existing:
            return existing

        profile = Profile(
            id=identity.id,
            email=identity.email,
            full_name=identity.display_name,
            avatar_url=identity.avatar_url
        )
        self.session.add(profile)
        try:
            self.session.commit()
            return profile
        except IntegrityError:
            # Another session created it between our lookup and insert
            self.session.rollback()
            existing = self.get_by_id(identity.id)
            if existing is None:
                raise
            return existing

    def count_profiles(self) -> int:
        return self.session.query(Profile).count()
