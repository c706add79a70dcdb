"""
asgi.py -- ASGI entrypoint for Chirpy.

Run with:  uvicorn asgi:app --reload

Process bootstrap only: configuration is loaded from the environment (and
.env) by the lifespan in api/main.py when the server starts.
"""

from api.main import app

__all__ = ["app"]
