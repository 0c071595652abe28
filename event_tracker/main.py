"""
Event Tracker - event ingestion and query service.

Features:
- Create, list (filtered by type and time range) and fetch events
- Concurrency-safe in-memory event store
- Structured logging with correlation IDs
- Per-client rate limiting
- Prometheus counters
- Health checks (liveness and readiness)
"""
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from . import __version__
from .config import Settings, get_settings
from .logging import setup_logging, get_logger, SERVICE_NAME
from .api.router import router
from .api.errors import install_error_handlers
from .health import HealthChecker
from .metrics import Metrics
from .middleware import CorrelationIdMiddleware, MetricsMiddleware, RequestSizeMiddleware
from .ratelimit import install_rate_limiting
from .services.event_service import EventService
from .storage.base import EventStore

logger = get_logger()


def create_app(settings: Settings | None = None, store: EventStore | None = None) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        settings: Configuration (defaults to environment-derived settings)
        store: Event store backend (defaults to a fresh in-memory store)
    """
    settings = settings or get_settings()
    setup_logging(json_output=settings.LOG_JSON, level=settings.LOG_LEVEL)

    metrics = Metrics(service_name=SERVICE_NAME, version=__version__)
    event_service = EventService(store=store, metrics=metrics)
    health_checker = HealthChecker(event_service, service_name=SERVICE_NAME, version=__version__)

    app = FastAPI(
        title="Event Tracker",
        version=__version__,
        description="Event ingestion and query service",
    )
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.event_service = event_service

    # Added innermost first: size guard, rate limit, metrics, correlation id
    app.add_middleware(RequestSizeMiddleware, max_size=settings.MAX_EVENT_SIZE)
    limiter = install_rate_limiting(app, settings)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)

    install_error_handlers(app)
    app.include_router(router)
    app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    @app.get("/health")
    @limiter.exempt
    async def health():
        """Liveness probe."""
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    @limiter.exempt
    async def health_ready():
        """
        Readiness probe.

        Returns:
            200: Service is ready to handle traffic
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        result = health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "service_starting",
            version=__version__,
            env=settings.ENV,
            bind_address=settings.BIND_ADDRESS,
            rate_limit=settings.RATE_LIMIT if settings.RATE_LIMIT_ENABLED else None,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("service_stopping", events=event_service.store.count())
        metrics.mark_down()

    return app


def run():
    """Console entry point: serve on the configured bind address."""
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_config=None,
    )


app = create_app()


if __name__ == "__main__":
    run()
