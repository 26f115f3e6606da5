from typing import Optional
import uuid

from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docshare.core.db import Database
from docshare.core.errors import VersionConflict
from docshare.db.base import as_utc, utcnow
from docshare.db.models.document import (
    Document as DocumentModel,
    DocumentGrant as DocumentGrantModel,
    DocumentHistory as DocumentHistoryModel
)
from docshare.domains.documents.entities import (
    Document, DocumentFilter, DocumentPage, DocumentPatch, Grant, HistoryAction,
    HistoryEntry, Permission, Visibility, changes_from_dict, changes_to_dict
)


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, database: Database):
        self.database = database

    def _select(self):
        return select(DocumentModel).options(
            selectinload(DocumentModel.grants),
            selectinload(DocumentModel.history)
        )

    async def _load(self, session: AsyncSession, document_id: uuid.UUID) -> Optional[Document]:
        result = await session.execute(
            self._select()
            .where(DocumentModel.uuid == document_id)
            .execution_options(populate_existing=True)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def get(self, document_id: uuid.UUID) -> Optional[Document]:
        """Получение документа по UUID (включая удаленные)"""
        async with self.database.session() as session:
            return await self._load(session, document_id)

    async def create(self, document: Document) -> Document:
        """Создание нового документа вместе со списком доступа"""
        created_at = as_utc(document.created_at) or utcnow()
        db_document = DocumentModel(
            uuid=document.id,
            title=document.title,
            content=document.content,
            author_id=document.author_id,
            visibility=document.visibility.value,
            tags=list(document.tags),
            is_deleted=document.is_deleted,
            version=document.version,
            created_at=created_at,
            last_modified=as_utc(document.last_modified) or created_at
        )
        db_document.grants = [
            DocumentGrantModel(user_id=grant.user_id, permission=grant.permission.value)
            for grant in document.shared_with
        ]

        async with self.database.session() as session:
            session.add(db_document)
            await session.commit()
            return await self._load(session, document.id)

    async def conditional_update(
        self,
        document_id: uuid.UUID,
        expected_version: int,
        patch: DocumentPatch
    ) -> Document:
        """Обновление документа, только если его версия равна expected_version"""
        values = {"version": expected_version + 1}
        if patch.title is not None:
            values["title"] = patch.title
        if patch.content is not None:
            values["content"] = patch.content
        if patch.visibility is not None:
            values["visibility"] = patch.visibility.value
        if patch.tags is not None:
            values["tags"] = list(patch.tags)
        if patch.is_deleted is not None:
            values["is_deleted"] = patch.is_deleted
        if patch.last_modified is not None:
            values["last_modified"] = as_utc(patch.last_modified)

        async with self.database.session() as session:
            async with session.begin():
                result = await session.execute(
                    update(DocumentModel)
                    .where(
                        DocumentModel.uuid == document_id,
                        DocumentModel.version == expected_version,
                        DocumentModel.is_deleted.is_(False)
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise VersionConflict(document_id, expected_version)

                if patch.shared_with is not None:
                    await session.execute(
                        delete(DocumentGrantModel).where(DocumentGrantModel.document_id == document_id)
                    )
                    session.add_all([
                        DocumentGrantModel(
                            document_id=document_id,
                            user_id=grant.user_id,
                            permission=grant.permission.value
                        )
                        for grant in patch.shared_with
                    ])

                if patch.append_history is not None:
                    entry = patch.append_history
                    session.add(DocumentHistoryModel(
                        document_id=document_id,
                        actor_id=entry.actor_id,
                        action=entry.action.value,
                        changes=changes_to_dict(entry.changes),
                        timestamp=as_utc(entry.timestamp)
                    ))

            return await self._load(session, document_id)

    async def list(self, document_filter: DocumentFilter, page: int = 1, per_page: int = 10) -> DocumentPage:
        """Выборка документов по фильтру, последние измененные первыми"""
        conditions = [DocumentModel.is_deleted.is_(False)]

        if document_filter.accessible_to is not None:
            user_id = document_filter.accessible_to
            conditions.append(or_(
                DocumentModel.author_id == user_id,
                DocumentModel.visibility == Visibility.PUBLIC.value,
                DocumentModel.grants.any(DocumentGrantModel.user_id == user_id)
            ))

        if document_filter.search:
            conditions.append(or_(
                DocumentModel.title.icontains(document_filter.search, autoescape=True),
                DocumentModel.content.icontains(document_filter.search, autoescape=True)
            ))

        async with self.database.session() as session:
            total = await session.scalar(
                select(func.count(DocumentModel.uuid)).where(*conditions)
            )
            result = await session.execute(
                self._select()
                .where(*conditions)
                .order_by(DocumentModel.last_modified.desc(), DocumentModel.uuid.asc())
                .offset((page - 1) * per_page)
                .limit(per_page)
            )
            documents = [self._to_domain(db_document) for db_document in result.scalars().all()]

        return DocumentPage(documents=documents, total=total or 0, page=page, per_page=per_page)

    def _to_domain(self, db_document: DocumentModel) -> Document:
        """Преобразование модели БД в доменную сущность"""
        return Document(
            id=db_document.uuid,
            title=db_document.title,
            content=db_document.content or "",
            author_id=db_document.author_id,
            visibility=Visibility(db_document.visibility),
            tags=tuple(db_document.tags or ()),
            shared_with=tuple(
                Grant(user_id=grant.user_id, permission=Permission(grant.permission))
                for grant in db_document.grants
            ),
            edit_history=tuple(
                HistoryEntry(
                    actor_id=entry.actor_id,
                    action=HistoryAction(entry.action),
                    changes=changes_from_dict(entry.changes or {}),
                    timestamp=as_utc(entry.timestamp)
                )
                for entry in db_document.history
            ),
            is_deleted=bool(db_document.is_deleted),
            version=db_document.version,
            created_at=as_utc(db_document.created_at),
            last_modified=as_utc(db_document.last_modified)
        )
