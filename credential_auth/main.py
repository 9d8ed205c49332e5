"""FastAPI application wiring for the credential authentication service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import ConnectionPool

from .api.routes import router as v1_router
from .config import Settings, get_settings
from .domain.service import CredentialAuthenticator
from .domain.session import SessionProjector, TokenEnricher
from .repository import build_memory_stores, build_postgres_stores
from .security.passwords import PasswordHasher
from .security.tokens import SessionTokenCodec

logger = logging.getLogger(__name__)

settings = get_settings()
logging.getLogger("credential_auth").setLevel(settings.log_level)


def configure_state(app: FastAPI, settings: Settings, stores) -> None:
    """Attach the authenticator and session layer built from ``settings`` to ``app``."""
    app.state.authenticator = CredentialAuthenticator(
        PasswordHasher(rounds=settings.bcrypt_rounds),
        stores,
    )
    app.state.token_codec = SessionTokenCodec(
        settings.token_secret,
        issuer=settings.token_issuer,
        ttl_seconds=settings.token_ttl_seconds,
    )
    app.state.token_enricher = TokenEnricher()
    app.state.session_projector = SessionProjector()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise shared resources (credential stores, session layer) for the app lifecycle."""
    if settings.store_backend == "memory":
        logger.warning("using in-memory credential stores; accounts are lost on restart")
        configure_state(app, settings, build_memory_stores())
        yield
        return

    pool = ConnectionPool(settings.database_url, open=False)
    pool.open()
    app.state.pool = pool
    stores = build_postgres_stores(pool)
    if settings.auto_create_schema:
        for store in (stores.regular, stores.privileged):
            store.create_schema()
            logger.info("ensured table %s", store.table)
    configure_state(app, settings, stores)
    try:
        yield
    finally:
        pool.close()


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

# CORS for local frontend dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    """Return a minimal readiness indicator used by orchestration systems."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(v1_router)


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.http_host, port=settings.http_port)
