"""
Main FastAPI application for the VS Agent chatbot.
"""

import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response

from vs_chatbot import __version__
from vs_chatbot.api.dependencies import Components, build_components
from vs_chatbot.api.routes import chatbot_router, webhooks_router
from vs_chatbot.config import Settings, get_settings
from vs_chatbot.utils.logging import setup_logging

logger = structlog.get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "vs_chatbot_requests_total",
    "Total requests",
    ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "vs_chatbot_request_latency_seconds",
    "Request latency",
    ["method", "endpoint"]
)


def create_app(settings: Settings | None = None, components: Components | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings, defaults to ``get_settings()``
        components: Prebuilt components; when given the lifespan neither
            builds nor closes them
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management."""
        owned = components is None
        if owned:
            # uvicorn workers are fresh processes
            setup_logging(settings)

        logger.info(
            "application_starting",
            environment=settings.environment,
            debug=settings.api.debug
        )

        app.state.components = await build_components(settings) if owned else components

        yield

        logger.info("application_shutting_down")
        if owned:
            await app.state.components.close()

    app = FastAPI(
        title="VS Agent Chatbot API",
        description="""
        Conversational agent behind a Verifiable Service agent.

        ## Features
        - Webhooks for inbound messages and connection state changes
        - Credential-based authentication through proof requests
        - Contextual menus that follow the session state
        - LLM answers with per-connection conversation memory
        """,
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging and metrics middleware
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID", str(time.time()))

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                error=str(e)
            )
            raise

        latency = time.time() - start_time
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(latency)

        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            latency_ms=int(latency * 1000)
        )

        response.headers["X-Request-ID"] = request_id
        return response

    # Exception handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    # Health check endpoints
    @app.get("/health")
    async def health_check():
        """Basic health check."""
        return {"status": "healthy"}

    @app.get("/health/ready")
    async def readiness_check(request: Request):
        """Readiness check: components are wired."""
        checks = {
            "api": True,
            "components": getattr(request.app.state, "components", None) is not None,
        }

        all_healthy = all(checks.values())
        return {
            "status": "ready" if all_healthy else "not_ready",
            "checks": checks
        }

    @app.get("/health/live")
    async def liveness_check():
        """Liveness check."""
        return {"status": "alive"}

    # Metrics endpoint
    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type="text/plain"
        )

    # Include routers
    app.include_router(webhooks_router)
    app.include_router(chatbot_router)

    return app
