"""
Health check endpoints.

Liveness/readiness probes plus a detailed check that the catalog tables are
reachable through Supabase.
"""

from typing import Any, Dict

from fastapi import APIRouter

from config.settings import get_settings
from config.database import get_supabase_client_optional


router = APIRouter(tags=["Health"])

SERVICE_NAME = "facet-catalog-api"


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
    }


def _check_table(client, table: str) -> Dict[str, Any]:
    try:
        result = client.table(table).select("id").limit(1).execute()
    except Exception as e:
        return {"status": "error", "error": str(e)}
    return {"status": "connected" if result.data else "empty", "error": None}


@router.get("/health/detailed")
def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Configuration loaded
    - Supabase client configured
    - Products and price band tables reachable

    Returns:
        "healthy" only when every table answered with data, else "degraded"
    """
    settings = get_settings()
    client = get_supabase_client_optional()

    if client is None:
        tables = {
            settings.products_table: {"status": "not_configured", "error": None},
            settings.price_bands_table: {"status": "not_configured", "error": None},
        }
    else:
        tables = {
            table: _check_table(client, table)
            for table in (settings.products_table, settings.price_bands_table)
        }

    healthy = all(check["status"] == "connected" for check in tables.values())
    return {
        "status": "healthy" if healthy else "degraded",
        "service": SERVICE_NAME,
        "environment": settings.environment,
        "checks": {
            "config": "ok",
            "supabase": tables,
        },
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, str]:
    """Kubernetes-style readiness probe."""
    if get_supabase_client_optional() is None:
        return {"status": "not_ready", "reason": "database_not_configured"}
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """Kubernetes-style liveness probe."""
    return {"status": "alive"}
