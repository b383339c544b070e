# api/schemas/profile.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class ProfileSchema(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
