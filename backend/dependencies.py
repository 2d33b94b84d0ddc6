"""FastAPI dependency injection for session management"""

from typing import Optional

from fastapi import Request, HTTPException

from backend.config import SESSION_HEADER, SESSION_COOKIE_NAME
from backend.sessions import get_session


def find_session_id(request: Request) -> Optional[str]:
    """Session id from the header, the cookie, or one the middleware just created"""
    for session_id in (
        request.headers.get(SESSION_HEADER),
        request.cookies.get(SESSION_COOKIE_NAME),
        getattr(request.state, "new_session_id", None),
    ):
        if session_id and get_session(session_id):
            return session_id
    return None


def get_current_session(request: Request) -> dict:
    """Resolve the caller's session or fail with 401"""
    session_id = find_session_id(request)
    if session_id is None:
        raise HTTPException(status_code=401, detail="No active session")
    return get_session(session_id)
