from fastapi import APIRouter

from docshare.api.http import documents_router, notifications_router, users_router

api_router = APIRouter(prefix="/api")
api_router.include_router(documents_router)
api_router.include_router(notifications_router)
api_router.include_router(users_router)
