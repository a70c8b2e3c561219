"""
Authentication-related schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SessionInfo(BaseModel):
    """The verified identity behind the current session cookie."""

    id: int = Field(description="User's database ID")
    username: str = Field(description="User's display name")
    expires_at: Optional[datetime] = Field(default=None, description="Session expiry (UTC)")


class MessageResponse(BaseModel):
    message: str
