"""
Pydantic schemas for API responses.
"""

from app.schemas.auth import SessionInfo, MessageResponse
from app.schemas.journal import JournalEntryResponse

__all__ = [
    "SessionInfo",
    "MessageResponse",
    "JournalEntryResponse",
]
