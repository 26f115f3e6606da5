from typing import Optional, Protocol
import uuid

from docshare.domains.documents.entities import Document, DocumentFilter, DocumentPage, DocumentPatch


class DocumentStore(Protocol):
    """Хранилище документов с условной записью по версии"""

    async def get(self, document_id: uuid.UUID) -> Optional[Document]:
        ...

    async def create(self, document: Document) -> Document:
        ...

    async def conditional_update(
        self, document_id: uuid.UUID, expected_version: int, patch: DocumentPatch
    ) -> Document:
        """Применяет patch, только если версия не изменилась, иначе VersionConflict"""
        ...

    async def list(self, document_filter: DocumentFilter, page: int = 1, per_page: int = 10) -> DocumentPage:
        """Выборка по фильтру, новые изменения первыми"""
        ...
