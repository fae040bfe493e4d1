"""FastAPI application entry point with structured logging and health checks."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from statement_interpreter import __version__
from statement_interpreter.api import analysis
from statement_interpreter.dependencies import get_settings
from statement_interpreter.health import router as health_router
from statement_interpreter.logging_config import get_logger, setup_logging

_settings = get_settings()
setup_logging(
    json_logs=_settings.json_logs,
    log_level=_settings.log_level,
    engine_log_level=_settings.engine_log_level,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the FastAPI application."""
    logger.info("application_startup", version=__version__)
    yield
    logger.info("application_shutdown")


app = FastAPI(
    title="Statement Interpreter",
    description=(
        "Interprets multi-year financial statements: red and green flags, "
        "ratios, trends, a weighted health score and plain-language advice."
    ),
    version=__version__,
    lifespan=lifespan,
)

# Health checks (no versioning)
app.include_router(health_router, tags=["health"])

API_V1_PREFIX = "/api/v1"

app.include_router(analysis.router, prefix=f"{API_V1_PREFIX}/analysis", tags=["analysis"])


@app.get("/")
def root():
    """Root endpoint - API information and available endpoints."""
    return {
        "service": "Statement Interpreter API",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "api_version": "v1",
        "endpoints": {
            "analysis": f"{API_V1_PREFIX}/analysis",
            "quick": f"{API_V1_PREFIX}/analysis/quick",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("statement_interpreter.main:app", host="0.0.0.0", port=8000, reload=_settings.debug)
