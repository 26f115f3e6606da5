from typing import Optional
import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docshare.core.config import Settings
from docshare.core.errors import AuthenticationRequired
from docshare.core.security import user_id_from_token
from docshare.domains.documents.services import DocumentService
from docshare.domains.identity.services import IdentityService
from docshare.domains.notifications.services import NotificationService

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


def get_identity_service(request: Request) -> IdentityService:
    return request.app.state.identity_service


async def get_optional_requester(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings_from_app)
) -> Optional[uuid.UUID]:
    """Идентификатор пользователя из Bearer-токена; None для анонимного запроса"""
    if credentials is None:
        return None
    return user_id_from_token(credentials.credentials, settings)


async def get_requester(requester_id: Optional[uuid.UUID] = Depends(get_optional_requester)) -> uuid.UUID:
    """Идентификатор пользователя; анонимный запрос отклоняется"""
    if requester_id is None:
        raise AuthenticationRequired()
    return requester_id
