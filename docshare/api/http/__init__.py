from docshare.api.http.health import router as health_router
from docshare.api.http.documents import router as documents_router
from docshare.api.http.notifications import router as notifications_router
from docshare.api.http.users import router as users_router

__all__ = [
    "health_router",
    "documents_router",
    "notifications_router",
    "users_router"
]
