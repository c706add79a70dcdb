"""
api/routes/admin.py -- Operator endpoints, mounted at /admin.

Routes:
  GET  /admin/metrics  -- HTML page with the /app visit count
  POST /admin/reset    -- wipe users, refresh tokens and chirps; zero the counter

Reset is only honoured when Settings.platform == "dev". On any other platform
it returns 403 and touches nothing.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import HTMLResponse

from api.metrics import HitCounter

logger = logging.getLogger("chirpy.api")

router = APIRouter()

_METRICS_HTML = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>"""


@router.get("/metrics", response_class=HTMLResponse)
async def metrics(request: Request) -> HTMLResponse:
    counter: HitCounter = request.app.state.metrics
    return HTMLResponse(_METRICS_HTML.format(hits=counter.hits))


@router.post("/reset", status_code=204)
def reset(request: Request) -> Response:
    if not request.app.state.settings.is_dev:
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": "Reset is only available on the dev platform."},
        )
    request.app.state.chirp_store.delete_all()
    request.app.state.user_store.delete_all()
    request.app.state.metrics.reset()
    logger.warning("All users, refresh tokens and chirps deleted via /admin/reset")
    return Response(status_code=204)
