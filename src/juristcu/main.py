"""
FastAPI application entry point for the JurisTCU API.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from juristcu.api.dependencies import get_provider_clients, get_repository
from juristcu.api.error_handlers import AVAILABLE_ENDPOINTS, EXCEPTION_HANDLERS
from juristcu.api.middleware import RequestTracingMiddleware
from juristcu.api.routes import router as api_router
from juristcu.config import settings
from juristcu.logging_config import configure_logging
from juristcu.taxonomy import count_criteria

# Configure structured logging before the app is built
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Análise e categorização de casos concretos com base em acórdãos do TCU",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(api_router, tags=["v1"])


@app.on_event("startup")
async def startup():
    """Refuse to start with an unusable configuration."""
    errors = settings.startup_errors()
    if errors:
        for error in errors:
            logger.error("Invalid configuration", error=error)
        raise RuntimeError("; ".join(errors))

    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        gemini_keys=len(settings.gemini_keys),
        claude=bool(settings.ANTHROPIC_API_KEY),
        openai=bool(settings.OPENAI_API_KEY),
        supabase=bool(settings.SUPABASE_URL and settings.SUPABASE_KEY),
        criteria_per_document=count_criteria(),
        endpoints=AVAILABLE_ENDPOINTS,
    )


@app.on_event("shutdown")
async def shutdown():
    """Close pooled HTTP connections."""
    logger.info("Application shutdown")
    for client in get_provider_clients().values():
        await client.close()
    await get_repository().close()
    logger.info("Application shutdown complete")


# Prometheus metrics instrumentation
if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "juristcu.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
