"""FastAPI application factory.

API layer:
- Validates inputs, reads/writes DB through services and the reader
- Returns read-models, never ORM entities
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Generator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shoplab.db.repo import DbSession
from shoplab.db.session import get_session, init_db

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def get_db_session() -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = get_session()
    try:
        yield session
    finally:
        session.close()


def _cors_origins() -> list[str]:
    """CORS origins from SHOPLAB_CORS_ORIGINS (comma-separated)."""
    raw = os.environ.get("SHOPLAB_CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        db_path: Optional path to database file. Tables are created on
            startup.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(db_path)
        yield

    app = FastAPI(
        title="shoplab API",
        description="Members, items and orders with comparable order read strategies",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routes
    from shoplab.api.routes import members, orders, simple_orders

    app.include_router(members.router, prefix="/api")
    app.include_router(orders.router, prefix="/api")
    app.include_router(simple_orders.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
