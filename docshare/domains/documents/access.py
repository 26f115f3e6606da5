import uuid
from dataclasses import dataclass
from typing import Optional

from docshare.core.errors import AccessDenied, AuthenticationRequired, NotFound
from docshare.domains.documents.entities import Document, Permission, Visibility


@dataclass(frozen=True)
class AccessDecision:
    granted: bool
    effective_permission: Optional[Permission] = None
    not_found: bool = False


def resolve_access(
    document: Document,
    requester_id: Optional[uuid.UUID],
    required: Permission = Permission.VIEW
) -> AccessDecision:
    """Эффективное право запрашивающего на документ.

    Правила применяются по порядку, срабатывает первое:
    удаленный документ не существует, автор может все, публичный
    документ доступен на чтение всем (включая анонимов), далее
    решает запись в списке доступа.
    """
    if document.is_deleted:
        return AccessDecision(granted=False, not_found=True)

    if document.is_author(requester_id):
        return AccessDecision(granted=True, effective_permission=Permission.EDIT)

    if document.visibility == Visibility.PUBLIC and required == Permission.VIEW:
        return AccessDecision(granted=True, effective_permission=Permission.VIEW)

    grant = document.grant_for(requester_id)
    if grant is None:
        return AccessDecision(granted=False)

    granted = required == Permission.VIEW or grant.permission == Permission.EDIT
    return AccessDecision(granted=granted, effective_permission=grant.permission)


def ensure_access(
    document: Optional[Document],
    requester_id: Optional[uuid.UUID],
    required: Permission = Permission.VIEW
) -> AccessDecision:
    """Проверка доступа с типизированной ошибкой для вызывающего"""
    if document is None:
        raise NotFound("Document not found")

    decision = resolve_access(document, requester_id, required)

    if decision.not_found:
        raise NotFound("Document not found")
    if not decision.granted:
        if requester_id is None:
            raise AuthenticationRequired()
        raise AccessDenied()

    return decision


def ensure_author(document: Optional[Document], requester_id: Optional[uuid.UUID], detail: str = "Access denied") -> Document:
    """Операции, доступные только автору (удаление, история)"""
    if document is None or document.is_deleted:
        raise NotFound("Document not found")
    if requester_id is None:
        raise AuthenticationRequired()
    if not document.is_author(requester_id):
        raise AccessDenied(detail)
    return document
