import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docshare.api.errors import register_error_handlers
from docshare.api.http import health_router
from docshare.api.router import api_router
from docshare.core.config import Settings, get_settings
from docshare.core.db import Database
from docshare.core.logs import configure_logging
from docshare.db.repositories import DocumentRepository, NotificationRepository, UserRepository
from docshare.domains.documents.services import DocumentService
from docshare.domains.identity.services import IdentityService
from docshare.domains.notifications.services import NotificationService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Сборка приложения: все зависимости создаются при старте и закрываются при остановке"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)

        database = Database(settings.database_url, echo=settings.sql_echo)
        database.open()
        await database.create_all()

        users = UserRepository(database)
        notifications = NotificationService(
            NotificationRepository(database),
            timeout=settings.dependency_timeout,
            page_size=settings.notifications_page_size
        )

        app.state.database = database
        app.state.notification_service = notifications
        app.state.identity_service = IdentityService(users, timeout=settings.dependency_timeout)
        app.state.document_service = DocumentService(
            DocumentRepository(database), users, notifications, settings
        )
        logger.info("DocShare started")

        try:
            yield
        finally:
            await database.close()
            logger.info("DocShare stopped")

    app = FastAPI(
        title="DocShare",
        description="Совместная работа с документами: доступ, упоминания, история и уведомления",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # В продакшене указать конкретные домены
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router)

    return app


app = create_app()
