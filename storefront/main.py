import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import models  # noqa: F401  registers the tables on Base.metadata
from .auth import TokenService
from .config import Settings
from .db import Base, make_engine, make_session_factory
from .errors import install_error_handlers
from .log import setup_logging
from .routes import build_api_router

access_logger = logging.getLogger("storefront.access")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Run with ``uvicorn storefront.main:create_app --factory``."""
    if settings is None:
        settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)

    engine = make_engine(settings.database_url)
    # Create tables if not existing. Schema changes are out of scope for the app itself.
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Storefront API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Filename"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        access_logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    install_error_handlers(app)

    @app.get("/")
    async def root():
        return {"hello": "world"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(build_api_router())
    return app
