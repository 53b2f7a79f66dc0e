"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..sync import SheetSync
from .routes import router

# Global sync instance
_sync: Optional[SheetSync] = None


def get_sync() -> SheetSync:
    """Get the global sync instance."""
    global _sync
    if _sync is None:
        _sync = SheetSync()
    return _sync


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global _sync
    get_sync()
    yield
    # Shutdown: write what is still pending
    if _sync is not None:
        await _sync.aclose()
        _sync = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="sheetlink",
        description="Read a Google Sheets grid and write cell edits back",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    return app
