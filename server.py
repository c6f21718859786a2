import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from config import Settings
from logging_config import setup_logging
from payments.checkout import XenditClient
from payments.routes import router as payments_router
from persistence.crud import BookingStore
from persistence.db import make_engine, make_session_factory
from reconciliation import ReconciliationService
from webhooks.webhooks import router as webhooks_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[XenditClient] = None,
    store: Optional[BookingStore] = None,
) -> FastAPI:
    """
    Build the API. provider and store default to the real Xendit client and
    SQL booking store built from settings; tests pass fakes instead.
    Only what is built here is closed on shutdown.
    """
    settings = settings or Settings.from_env()
    owned_provider = None
    owned_engine = None
    if provider is None:
        provider = owned_provider = XenditClient.from_settings(settings)
    if store is None:
        owned_engine = make_engine(settings.database_url)
        store = BookingStore(make_session_factory(owned_engine))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owned_provider is not None:
            owned_provider.close()
        if owned_engine is not None:
            owned_engine.dispose()

    app = FastAPI(title="Booking payments backend", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.provider = provider
    app.state.store = store
    app.state.reconciliation = ReconciliationService(provider, store)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Booking System Backend is running"

    app.include_router(payments_router)
    app.include_router(webhooks_router)
    return app


def main():
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Server starting", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
