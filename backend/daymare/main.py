"""
Daymare Backend: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application that hosts the blog.
How:   ``create_app()`` registers middleware, exception handlers, the health
       route and one catch-all endpoint. The catch-all hands every other
       request to the blog Router built around an ArticleStore.
Who:   uvicorn (``uvicorn daymare.main:app``) and the ``daymare`` console
       script; tests call ``create_app(store=...)`` directly.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Logging → GZip → CORS   │
    │                                                     │
    │  Routes:       GET /health                          │
    │                /{path} ──▶ Router.dispatch()        │
    │                             ├ POST   /api/save      │
    │                             ├ *      /api/article/… │
    │                             ├ GET    /api/index     │
    │                             └ GET    /* (static)    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Connect to MongoDB and ping it; failure aborts startup
    3. Build the ArticleStore and the frozen route table
    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import Response

from daymare import __app_name__, __version__
from daymare.config import settings
from daymare.database import close_mongo, connect_mongo, get_article_collection
from daymare.exceptions import DaymareError
from daymare.middleware.logging import RequestLoggingMiddleware
from daymare.middleware.request_id import RequestIDMiddleware, request_id_var
from daymare.routes import health
from daymare.routes.blog import build_blog_router
from daymare.services.article_store import ArticleStore

logger = logging.getLogger(__name__)

ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, writing to stdout.

    Format: 2024-01-15T12:00:00 [INFO] daymare.access: GET /api/index 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Wiring
# ══════════════════════════════════════════════════════════════════════════

def wire_blog(app: FastAPI, store: ArticleStore, static_root: Optional[str] = None) -> None:
    """Attach the store and its frozen route table to ``app.state``."""
    app.state.store = store
    app.state.router = build_blog_router(store, static_root)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the MongoDB client for the life of the process.

    When the app was created with an injected store (tests), nothing is
    connected here. Otherwise the client is created and pinged; a
    StoreUnavailableError escapes and uvicorn aborts startup.
    """
    setup_logging()
    logger.info("%s backend %s starting up...", __app_name__, __version__)

    client = None
    if getattr(app.state, "router", None) is None:
        client = await connect_mongo(settings)
        store = ArticleStore(get_article_collection(client, settings))
        wire_blog(app, store, app.state.static_root)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("%s backend shutting down...", __app_name__)
    if client is not None:
        close_mongo(client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Render errors that escape outside the blog Router.

    Errors raised by blog handlers are rendered by ``Router.dispatch``
    through the same ErrorKind table; these handlers cover everything else.
    """

    @app.exception_handler(DaymareError)
    async def handle_daymare_error(request: Request, exc: DaymareError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

async def dispatch_to_blog(request: Request) -> Response:
    """Catch-all endpoint: everything that is not /health goes through the Router."""
    return await request.app.state.router.dispatch(request)


def create_app(store: Optional[ArticleStore] = None, static_root: Optional[str] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store:        Pre-built ArticleStore. When given, the route table is
                      wired immediately and the lifespan connects nothing.
        static_root:  Directory of static assets (defaults to settings).
    """
    app = FastAPI(
        title=f"{__app_name__} API",
        description="Minimal blog backend: articles in MongoDB, served as JSON.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.static_root = static_root
    if store is not None:
        wire_blog(app, store, static_root)

    # Last added runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # /health must precede the catch-all.
    app.include_router(health.router)
    app.add_api_route(
        "/{full_path:path}",
        dispatch_to_blog,
        methods=ROUTED_METHODS,
        include_in_schema=False,
    )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``daymare.main:app`` with uvicorn."""
    uvicorn.run(
        "daymare.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
