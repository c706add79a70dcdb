"""
api/routes/v1/auth.py -- Account and session-token REST endpoints.

Routes:
  POST /api/v1/users    -- signup; returns account + access/refresh token pair (201)
  POST /api/v1/login    -- password login; returns account + token pair (200)
  POST /api/v1/refresh  -- Bearer <refresh token> -> new access token (200)
  POST /api/v1/revoke   -- Bearer <refresh token> -> revoke it (204)

Security:
  Login returns the same 401 body for unknown email and wrong password
      (SessionService also equalizes timing).
  Refresh and revoke return the same 401 body for every cause -- missing
      header, wrong scheme, unknown, expired, or revoked token -- so the
      endpoint cannot be used as a token oracle.
  Cache-Control: no-store on every response that carries a token.

Handlers are plain `def`: bcrypt and the store are blocking, so FastAPI runs
them in its thread pool.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from api.models import AccessTokenResponse, CredentialsRequest, SessionResponse
from auth.dependencies import UNAUTHORIZED_DETAIL, get_sessions
from auth.errors import EmailConflict, HashingFailure, InvalidCredentials, PersistenceFailure, Unauthorized
from auth.sessions import SessionService

logger = logging.getLogger("chirpy.api")

# Auth policy:
# - POST /api/v1/users:    public -- creates the account
# - POST /api/v1/login:    public -- credentials in the body
# - POST /api/v1/refresh:  refresh token in Authorization header
# - POST /api/v1/revoke:   refresh token in Authorization header
router = APIRouter()

_NO_STORE = {"Cache-Control": "no-store"}
_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _session_json(status_code: int, body: SessionResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=_NO_STORE)


@router.post("/users", response_model=SessionResponse, status_code=201)
def signup(body: CredentialsRequest, sessions: SessionService = Depends(get_sessions)) -> JSONResponse:
    """Create an account and return it with a fresh token pair."""
    try:
        session = sessions.signup(body.email, body.password)
    except EmailConflict as exc:
        raise HTTPException(
            status_code=409,
            detail={"code": "conflict", "message": "A user with that email already exists."},
        ) from exc
    except (HashingFailure, PersistenceFailure) as exc:
        logger.error("Signup failed: %s", type(exc).__name__, exc_info=exc)
        raise HTTPException(
            status_code=500,
            detail={"code": "internal_error", "message": "Could not create account."},
        ) from exc
    return _session_json(201, SessionResponse.from_session(session))


@router.post("/login", response_model=SessionResponse)
def login(body: CredentialsRequest, sessions: SessionService = Depends(get_sessions)) -> JSONResponse:
    """Authenticate with email and password; return a fresh token pair."""
    try:
        session = sessions.login(body.email, body.password)
    except InvalidCredentials:
        return JSONResponse(
            status_code=401,
            content={"error": {"code": "invalid_credentials", "message": "Incorrect email or password."}},
            headers=_NO_STORE,
        )
    return _session_json(200, SessionResponse.from_session(session))


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(request: Request, sessions: SessionService = Depends(get_sessions)) -> JSONResponse:
    """Exchange a refresh token for a new access token. The refresh token is not rotated."""
    try:
        token = sessions.refresh_access_token(request.headers.get("Authorization"))
    except Unauthorized as exc:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL, headers=_BEARER_CHALLENGE) from exc
    return JSONResponse(content=AccessTokenResponse(token=token).model_dump(), headers=_NO_STORE)


@router.post("/revoke", status_code=204)
def revoke(request: Request, sessions: SessionService = Depends(get_sessions)) -> Response:
    """Revoke a refresh token. Revoking twice is accepted."""
    try:
        sessions.revoke_refresh_token(request.headers.get("Authorization"))
    except Unauthorized as exc:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED_DETAIL, headers=_BEARER_CHALLENGE) from exc
    return Response(status_code=204)
