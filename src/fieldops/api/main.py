"""ASGI entrypoint: ``uvicorn fieldops.api.main:app``."""

from __future__ import annotations

import uvicorn

from fieldops.api.app import create_app

app = create_app()


def run() -> None:
    """Serve the app on 0.0.0.0:8000 (``fieldops-api`` console script)."""
    uvicorn.run("fieldops.api.main:app", host="0.0.0.0", port=8000)
