import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Tuple

from docshare.core.config import Settings
from docshare.core.errors import AuthenticationRequired, NotFound, ValidationFailed, VersionConflict
from docshare.core.resilience import bounded
from docshare.domains.documents import history
from docshare.domains.documents.access import ensure_access, ensure_author
from docshare.domains.documents.contracts import DocumentStore
from docshare.domains.documents.entities import (
    ContentChange, Document, DocumentFilter, DocumentPage, DocumentPatch, Grant,
    HistoryEntry, Permission
)
from docshare.domains.documents.mentions import MentionEngine, extract_mentions
from docshare.domains.documents.schemas import DocumentCreate, DocumentUpdate
from docshare.domains.identity.contracts import IdentityDirectory
from docshare.domains.identity.entities import Identity
from docshare.domains.notifications.entities import (
    FailedNotification, Notification, NotificationDraft, NotificationType
)
from docshare.domains.notifications.services import NotificationService, utcnow

logger = logging.getLogger(__name__)

# Мутация по снимку: patch для записи (None, если менять нечего) и уведомления после записи
Mutation = Tuple[Optional[DocumentPatch], List[NotificationDraft]]


def share_message(sender: Identity, title: str) -> str:
    return f'{sender.display_name} shared "{title}" with you'


@dataclass
class MutationResult:
    """Итог мутации: документ и результат рассылки уведомлений"""
    document: Document
    notifications: List[Notification] = field(default_factory=list)
    failed_notifications: List[FailedNotification] = field(default_factory=list)


@dataclass
class HistoryView:
    document: Document
    entries: List[HistoryEntry]


class DocumentService:
    """Операции над документами для HTTP-слоя.

    Каждая мутация читает текущий снимок, вычисляет изменения по нему
    и записывает их условно по версии. При конфликте версий мутация
    повторяется со свежего чтения, не более `max_write_retries` раз.
    """

    def __init__(
        self,
        documents: DocumentStore,
        directory: IdentityDirectory,
        notifications: NotificationService,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow
    ):
        self.documents = documents
        self.directory = directory
        self.notifications = notifications
        self.timeout = settings.dependency_timeout
        self.max_write_retries = max(1, settings.max_write_retries)
        self.page_size = settings.documents_page_size
        self.clock = clock
        self.mentions = MentionEngine(directory, self.timeout)

    async def _store(self, awaitable):
        return await bounded(awaitable, self.timeout, "Document store")

    async def _directory(self, awaitable):
        return await bounded(awaitable, self.timeout, "Identity directory")

    async def _require_actor(self, requester_id: Optional[uuid.UUID]) -> Identity:
        if requester_id is None:
            raise AuthenticationRequired()
        actor = await self._directory(self.directory.find_by_id(requester_id))
        if actor is None:
            raise AuthenticationRequired("User not found")
        return actor

    async def _mutate(
        self,
        document_id: uuid.UUID,
        build: Callable[[Document], Awaitable[Mutation]]
    ) -> MutationResult:
        """Чтение, вычисление изменений и условная запись с ограниченным числом повторов"""
        for attempt in range(1, self.max_write_retries + 1):
            existing = await self._store(self.documents.get(document_id))
            if existing is None:
                raise NotFound("Document not found")

            patch, drafts = await build(existing)
            if patch is None or patch.is_empty():
                return MutationResult(document=existing)

            try:
                updated = await self._store(
                    self.documents.conditional_update(document_id, existing.version, patch)
                )
            except VersionConflict:
                logger.warning(
                    f"Version conflict on document {document_id} at version {existing.version} "
                    f"(attempt {attempt}/{self.max_write_retries})"
                )
                continue

            fan_out = await self.notifications.fan_out(drafts)
            return MutationResult(
                document=updated,
                notifications=fan_out.created,
                failed_notifications=fan_out.failed
            )

        raise VersionConflict(document_id)

    async def create_document(self, requester_id: Optional[uuid.UUID], data: DocumentCreate) -> MutationResult:
        """Создание документа; упомянутые пользователи получают доступ на чтение"""
        actor = await self._require_actor(requester_id)
        now = self.clock()

        document = Document(
            id=uuid.uuid4(),
            title=data.title,
            content=data.content,
            author_id=actor.id,
            visibility=data.visibility,
            tags=tuple(data.tags),
            created_at=now,
            last_modified=now
        )

        auto_share = await self.mentions.resolve_and_auto_share(
            document, extract_mentions(data.content), actor
        )
        document = replace(document, shared_with=tuple(auto_share.new_grants))

        created = await self._store(self.documents.create(document))
        logger.info(f"Document {created.id} created by {actor.id}")

        fan_out = await self.notifications.fan_out(auto_share.notifications)
        return MutationResult(
            document=created,
            notifications=fan_out.created,
            failed_notifications=fan_out.failed
        )

    async def get_document(self, document_id: uuid.UUID, requester_id: Optional[uuid.UUID] = None) -> Document:
        """Публичные документы доступны и анонимно"""
        document = await self._store(self.documents.get(document_id))
        ensure_access(document, requester_id, Permission.VIEW)
        return document

    async def list_documents(
        self,
        requester_id: Optional[uuid.UUID],
        search: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None
    ) -> DocumentPage:
        """Документы, доступные пользователю: свои, публичные и открытые ему"""
        if requester_id is None:
            raise AuthenticationRequired()
        per_page = per_page or self.page_size
        if page < 1 or per_page < 1:
            raise ValidationFailed.for_field("page", "Page and limit must be positive")

        document_filter = DocumentFilter(accessible_to=requester_id, search=(search or "").strip() or None)
        return await self._store(self.documents.list(document_filter, page=page, per_page=per_page))

    async def update_document(
        self,
        document_id: uuid.UUID,
        requester_id: Optional[uuid.UUID],
        data: DocumentUpdate
    ) -> MutationResult:
        """Обновление с записью истории; пустое обновление ничего не меняет"""
        actor = await self._require_actor(requester_id)
        proposed = data.to_patch()

        async def build(existing: Document) -> Mutation:
            ensure_access(existing, actor.id, Permission.EDIT)

            now = self.clock()
            entry = history.record(existing, proposed, actor.id, now)
            if entry is None:
                return None, []

            changes = history.changed_fields(existing, proposed)
            shared_with = None
            drafts: List[NotificationDraft] = []

            if any(isinstance(change, ContentChange) for change in entry.changes):
                auto_share = await self.mentions.resolve_and_auto_share(
                    replace(existing, title=changes.title or existing.title),
                    extract_mentions(proposed.content),
                    actor
                )
                if auto_share.new_grants:
                    shared_with = existing.shared_with + tuple(auto_share.new_grants)
                    drafts = auto_share.notifications

            patch = replace(changes, shared_with=shared_with, append_history=entry, last_modified=now)
            return patch, drafts

        result = await self._mutate(document_id, build)
        logger.info(f"Document {document_id} updated by {actor.id} (version {result.document.version})")
        return result

    async def share_document(
        self,
        document_id: uuid.UUID,
        requester_id: Optional[uuid.UUID],
        email: str,
        permission: Permission
    ) -> MutationResult:
        """Открытие доступа пользователю по email или смена уровня его доступа"""
        actor = await self._require_actor(requester_id)

        async def build(existing: Document) -> Mutation:
            ensure_access(existing, actor.id, Permission.EDIT)

            target = await self._directory(self.directory.find_by_email(email))
            if target is None:
                raise NotFound("User not found")
            if target.id == existing.author_id:
                raise ValidationFailed.for_field("email", "The author already has full access")

            current = existing.grant_for(target.id)
            if current is not None and current.permission == permission:
                # Повторное применение того же доступа ничего не меняет
                return None, []

            if current is None:
                shared_with = existing.shared_with + (Grant(user_id=target.id, permission=permission),)
            else:
                shared_with = tuple(
                    Grant(user_id=grant.user_id, permission=permission) if grant.user_id == target.id else grant
                    for grant in existing.shared_with
                )

            drafts = []
            if target.id != actor.id:
                drafts.append(NotificationDraft(
                    recipient_id=target.id,
                    sender_id=actor.id,
                    type=NotificationType.SHARE,
                    document_id=existing.id,
                    message=share_message(actor, existing.title)
                ))
            return DocumentPatch(shared_with=shared_with), drafts

        result = await self._mutate(document_id, build)
        logger.info(f"Document {document_id} shared with {email} ({permission.value}) by {actor.id}")
        return result

    async def unshare_document(
        self,
        document_id: uuid.UUID,
        requester_id: Optional[uuid.UUID],
        user_id: uuid.UUID
    ) -> MutationResult:
        """Отзыв доступа; отзыв отсутствующего доступа ничего не меняет"""
        actor = await self._require_actor(requester_id)

        async def build(existing: Document) -> Mutation:
            ensure_access(existing, actor.id, Permission.EDIT)

            if existing.grant_for(user_id) is None:
                return None, []

            shared_with = tuple(grant for grant in existing.shared_with if grant.user_id != user_id)
            return DocumentPatch(shared_with=shared_with), []

        result = await self._mutate(document_id, build)
        logger.info(f"Access of {user_id} to document {document_id} revoked by {actor.id}")
        return result

    async def delete_document(self, document_id: uuid.UUID, requester_id: Optional[uuid.UUID]) -> MutationResult:
        """Мягкое удаление, только автором"""
        actor = await self._require_actor(requester_id)

        async def build(existing: Document) -> Mutation:
            ensure_author(existing, actor.id)
            return DocumentPatch(is_deleted=True), []

        result = await self._mutate(document_id, build)
        logger.info(f"Document {document_id} deleted by {actor.id}")
        return result

    async def get_history(self, document_id: uuid.UUID, requester_id: Optional[uuid.UUID]) -> HistoryView:
        """История правок видна только автору"""
        if requester_id is None:
            raise AuthenticationRequired()

        document = await self._store(self.documents.get(document_id))
        ensure_author(document, requester_id, detail="Not authorized")
        return HistoryView(document=document, entries=history.full_history(document))
