"""Route modules."""

from .admin import router as admin_router
from .dashboard import router as dashboard_router
from .keys import router as keys_router
from .whoami import router as whoami_router

__all__ = ["admin_router", "dashboard_router", "keys_router", "whoami_router"]
