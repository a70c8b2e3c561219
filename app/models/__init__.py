"""
Journal Database Models

This module exports all SQLAlchemy models for the application.
"""

from app.models.user import User
from app.models.journal import JournalEntry

__all__ = [
    "User",
    "JournalEntry",
]
