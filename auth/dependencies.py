"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Only one auth method exists: an access token in the Authorization: Bearer
header. Every failure -- missing header, wrong scheme, bad signature, expired
token -- becomes the same 401 body so clients cannot tell them apart.

get_sessions() pulls the SessionService that the lifespan placed on
app.state. get_current_user_id() wraps it and raises HTTP 401.

Layer rule: no imports from chirps/. This module may import from fastapi
because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, Request

from auth.errors import Unauthorized
from auth.sessions import SessionService

UNAUTHORIZED_DETAIL = {"code": "unauthorized", "message": "Authentication required."}


def get_sessions(request: Request) -> SessionService:
    return request.app.state.sessions


def get_current_user_id(request: Request, sessions: SessionService = Depends(get_sessions)) -> UUID:
    """Require a valid access token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.post("/chirps")
        def route(user_id: UUID = Depends(get_current_user_id)): ...
    """
    try:
        return sessions.authenticate_request(request.headers.get("Authorization"))
    except Unauthorized as exc:
        raise HTTPException(
            status_code=401,
            detail=UNAUTHORIZED_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
