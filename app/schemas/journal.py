"""
Journal entry schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class JournalEntryResponse(BaseModel):
    """A stored journal entry as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    entry: str
    score: int
    mood: str
    date: datetime
