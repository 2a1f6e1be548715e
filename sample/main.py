# sample/main.py
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware

from sample import __version__
from sample.adapters.api import health
from sample.adapters.api.endpoints import map_endpoints
from sample.adapters.api.errors import install_exception_handlers
from sample.adapters.api.middleware import bind_request_context
from sample.shared.container import Container, container
from sample.shared.logging_config import configure_logging
from sample.shared.telemetry import instrument_fastapi, setup_telemetry

logger = structlog.get_logger(__name__)

WIRED_MODULES = [
    "sample.adapters.api.dependencies",
    "sample.adapters.api.health",
]


def create_app(app_container: Optional[Container] = None) -> FastAPI:
    """
    Factory function to create the FastAPI application.

    ``app_container`` lets tests pass a container whose providers were
    overridden; the process-wide one is used otherwise.
    """
    app_container = app_container or container
    settings = app_container.settings()

    # 1. Logging first, so every later step is observable
    configure_logging(settings)

    wired_modules: List[str] = list(WIRED_MODULES)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application Lifecycle Manager.
        Handles startup (Telemetry, DI wiring, schema) and shutdown.
        """
        setup_telemetry(settings)
        logger.info("app_startup", app=settings.APP_NAME, env=settings.APP_ENV.value)

        app_container.wire(modules=wired_modules)
        try:
            # Runs both registration modules once; fails fast on bad config.
            app_container.services()
            if settings.DB_AUTO_CREATE:
                await app_container.database().create_all()
        except Exception as e:
            logger.error("app_startup_failed", error=str(e))
            app_container.unwire()
            raise

        yield

        logger.info("app_shutdown")
        try:
            await app_container.services().aclose()
        finally:
            await app_container.database().dispose()
            app_container.unwire()

    docs_enabled = settings.is_development
    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description="Layered sample backend with keyed repositories",
        debug=settings.DEBUG,
        openapi_url="/openapi.json" if docs_enabled else None,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.container = app_container

    # 2. Request context (innermost middleware)
    app.middleware("http")(bind_request_context)

    # 3. CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    # 4. HTTPS redirection (outermost when enabled)
    if settings.HTTPS_REDIRECT:
        app.add_middleware(HTTPSRedirectMiddleware)

    # 5. Global Exception Handlers
    install_exception_handlers(app, settings.APP_NAME, debug=settings.DEBUG)

    # 6. Auto-Instrument FastAPI for Tracing
    instrument_fastapi(app, settings)

    # 7. Routes: health probes, then every discovered endpoint module
    app.include_router(health.router, prefix=settings.HEALTH_PATH)
    wired_modules.extend(map_endpoints(app, prefix=settings.API_PREFIX))

    return app


def main() -> int:
    """Runs the API with uvicorn; returns a process exit code."""
    settings = container.settings()
    config = uvicorn.Config(
        "sample.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        lifespan="on",
        log_config=None,
    )
    server = uvicorn.Server(config)
    try:
        server.run()
    except Exception as e:
        logger.error("server_crashed", error=str(e))
        return 1

    if not server.started:
        logger.error("server_startup_failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
