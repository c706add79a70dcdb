"""
api/metrics.py -- Request counter for the admin metrics page.

One HitCounter is created per application in the lifespan and stored on
app.state. The /app file server wrapper and the admin routes reach it through
the app state, never through a module global, so each app (and each
test client) counts independently.
"""

from __future__ import annotations

import threading

from starlette.types import ASGIApp, Receive, Scope, Send


class HitCounter:
    """Thread-safe integer counter.

    Sync route handlers run in FastAPI's thread pool, so increments can race;
    the lock keeps read-modify-write atomic.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits = 0

    def increment(self) -> None:
        with self._lock:
            self._hits += 1

    def reset(self) -> None:
        with self._lock:
            self._hits = 0

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits


class CountingStaticFiles:
    """ASGI wrapper that counts each HTTP request before delegating.

    Mounted around the /app file server, so /admin/metrics reports page
    visits and not API traffic. The counter is looked up on the root app's
    state at request time.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            scope["app"].state.metrics.increment()
        await self.app(scope, receive, send)
