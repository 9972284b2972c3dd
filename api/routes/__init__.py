"""
API route modules.
"""

from api.routes.auth import router as auth_router
from api.routes.health import router as health_router
from api.routes.proxy import router as proxy_router
from api.routes.records import router as records_router

__all__ = ["auth_router", "health_router", "proxy_router", "records_router"]
