"""
api/routes/v1/chirps.py -- Chirp REST endpoints.

Routes:
  POST /api/v1/chirps             -- create a chirp (requires access token)
  GET  /api/v1/chirps             -- list all chirps, oldest first (public)
  GET  /api/v1/chirps/{chirp_id}  -- single chirp or 404 (public)

The author of a new chirp is always the user named by the access token. The
request body has no user field, so one user cannot post as another.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import ChirpCreate, ChirpResponse
from auth.dependencies import get_current_user_id
from chirps.censor import ChirpTooLong, clean_body
from chirps.models import Chirp
from chirps.store import ChirpStore

router = APIRouter()


def _chirp_store(request: Request) -> ChirpStore:
    return request.app.state.chirp_store


@router.post("/chirps", response_model=ChirpResponse, status_code=201)
def create_chirp(
    body: ChirpCreate,
    user_id: UUID = Depends(get_current_user_id),
    store: ChirpStore = Depends(_chirp_store),
) -> ChirpResponse:
    try:
        cleaned = clean_body(body.body)
    except ChirpTooLong as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "chirp_too_long", "message": str(exc)},
        ) from exc
    chirp = store.create_chirp(Chirp(body=cleaned, user_id=user_id))
    return ChirpResponse.from_chirp(chirp)


@router.get("/chirps", response_model=list[ChirpResponse])
def list_chirps(store: ChirpStore = Depends(_chirp_store)) -> list[ChirpResponse]:
    return [ChirpResponse.from_chirp(c) for c in store.list_chirps()]


@router.get("/chirps/{chirp_id}", response_model=ChirpResponse)
def get_chirp(chirp_id: UUID, store: ChirpStore = Depends(_chirp_store)) -> ChirpResponse:
    chirp = store.get_chirp(chirp_id)
    if chirp is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Chirp not found."},
        )
    return ChirpResponse.from_chirp(chirp)
