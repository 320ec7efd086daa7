# API endpoints and routers

from .attractions_endpoints import router as attractions_router
from .users_endpoints import router as users_router
from .lists_endpoints import router as lists_router
from .check_ins_endpoints import router as check_ins_router
from .metrics_endpoints import router as metrics_router

__all__ = [
    "attractions_router",
    "users_router",
    "lists_router",
    "check_ins_router",
    "metrics_router",
]
