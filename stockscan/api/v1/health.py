"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from stockscan.catalog.catalog import get_catalog
from stockscan.config import Settings, get_settings


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""
    
    def __init__(self, settings: Settings):
        self._settings = settings
    
    def check_catalog(self) -> dict:
        """Check catalog status."""
        if self._settings.uses_remote_catalog:
            return {"status": "remote", "products": None}
        
        catalog = get_catalog()
        if catalog:
            return {"status": "healthy", "products": len(catalog.products)}
        return {"status": "not_loaded", "products": 0}
    
    def get_health(self) -> dict:
        """Get full health status."""
        catalog_info = self.check_catalog()
        
        overall = "healthy" if catalog_info["status"] != "not_loaded" else "degraded"
        
        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "catalog": catalog_info["status"]
            },
            "details": {
                "catalog_source": self._settings.catalog_source,
                "products_loaded": catalog_info["products"]
            }
        }


@router.get("")
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Health check endpoint.
    
    Returns system status including API and catalog.
    """
    controller = HealthController(settings)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
