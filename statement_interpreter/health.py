"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from statement_interpreter import __version__
from statement_interpreter.config import Settings
from statement_interpreter.dependencies import get_settings
from statement_interpreter.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Basic health check - just app status."""
    return {"status": "healthy", "service": settings.app_name, "version": __version__}


@router.get("/health/live")
def liveness_check() -> Dict[str, Any]:
    """Kubernetes-style liveness probe."""
    return {"alive": True}
