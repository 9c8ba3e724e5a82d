"""FastAPI application entrypoint for the thumbnail lookup service."""
from __future__ import annotations

from pathlib import Path
from typing import Final

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from yt_thumbnails.core.config import get_settings, Settings
from yt_thumbnails.core.logging_cfg import setup_logging
from yt_thumbnails.api.http import router as api_router

UI_DIR: Final[Path] = Path(__file__).parent / "ui"


def create_app() -> FastAPI:
    """Build the app serving the thumbnail gallery page and its JSON API.

    Notes
    -----
    - The gallery is one static page plus ``/static/app.js`` and ``/static/app.css``;
      all lookups go through ``POST /api/thumbnails``.
    - Nothing is stored between requests, so the app needs no startup or shutdown hooks.

    Returns
    -------
    FastAPI
        The configured FastAPI application.
    """

    settings: Settings = get_settings()
    setup_logging(settings.debug)

    app: FastAPI = FastAPI(title=settings.app_name)
    app.mount("/static", StaticFiles(directory=UI_DIR / "static"), name="static")
    app.include_router(api_router)

    @app.get("/", tags=["ui"])
    def index() -> FileResponse:
        """Serve the gallery page: URL input, tier cards, copy and download buttons."""

        return FileResponse(UI_DIR / "templates" / "index.html")

    @app.get("/health", tags=["system"])
    def health() -> dict[str, str]:
        """Report liveness without probing the image host."""

        return {"status": "ok"}

    return app


app: Final[FastAPI] = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("yt_thumbnails.main:app", host="127.0.0.1", port=8000, reload=True)
