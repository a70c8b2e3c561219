"""
API Router configuration.

Routes are mounted at the root because the HTML forms post to
/signup, /login, /logout and /submit-entry directly.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, journal

api_router = APIRouter()

# Authentication (signup/login/logout are public)
api_router.include_router(
    auth.router,
    tags=["authentication"]
)

# Journal entries (session required)
api_router.include_router(
    journal.router,
    tags=["journal"]
)
