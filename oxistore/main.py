"""Application factory for the OxiStore HTTP server.

This module exposes `create_app(config)` which performs all setup
(logging, storage composition, router registration). Nothing is created
at import time so tests can construct isolated apps.

To create an app for production or local runs:

    from oxistore.main import create_app
    from oxistore.config import StoreConfig
    app = create_app(StoreConfig(backend="single_file"))
"""
from typing import Optional

from fastapi import FastAPI

from oxistore import __version__
from oxistore.config import StoreConfig
from oxistore.logging_config import configure_logging
from oxistore.services import ServiceContainer
from oxistore.store import OxiStorage, open_storage


def create_app(config: Optional[StoreConfig] = None, storage: Optional[OxiStorage] = None) -> FastAPI:
    """Create and return a configured FastAPI application.

    An already opened `storage` takes precedence over the backend named in
    `config`.
    """
    config = config or StoreConfig()
    logger = configure_logging(config.log_level)

    if storage is None:
        storage = open_storage(config)
    logger.info("Serving %s storage", type(storage.backend).__name__)

    app = FastAPI(title="OxiStore Server", version=__version__)
    app.state.container = ServiceContainer(storage, config)

    # Router registration: import here to avoid import-time side-effects
    from oxistore.server.api import router as storage_router
    app.include_router(storage_router, prefix='/api')

    return app
