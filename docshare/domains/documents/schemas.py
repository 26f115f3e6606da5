from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Any, Dict, List, Optional
import uuid
from datetime import datetime

from docshare.domains.documents.entities import (
    Document, DocumentPatch, HistoryAction, HistoryEntry, Permission, Visibility
)


def _clean_tags(tags: List[str]) -> List[str]:
    return [tag.strip() for tag in tags if tag and tag.strip()]


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=1000000)  # 1MB max content
    visibility: Visibility = Visibility.PRIVATE
    tags: List[str] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title is required')
        return v.strip()

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Content is required')
        return v

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)


class DocumentUpdate(BaseModel):
    """Схема для обновления документа: отсутствующие поля не меняются"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1, max_length=1000000)
    visibility: Optional[Visibility] = None
    tags: Optional[List[str]] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Content cannot be empty')
        return v

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v) if v is not None else v

    def to_patch(self) -> DocumentPatch:
        return DocumentPatch(
            title=self.title,
            content=self.content,
            visibility=self.visibility,
            tags=tuple(self.tags) if self.tags is not None else None
        )


class DocumentShareRequest(BaseModel):
    """Схема для запроса на предоставление доступа к документу"""
    email: EmailStr
    permission: Permission = Permission.VIEW


class GrantResponse(BaseModel):
    user_id: uuid.UUID
    permission: Permission

    model_config = ConfigDict(from_attributes=True)


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    id: uuid.UUID
    title: str
    content: str
    author_id: uuid.UUID
    visibility: Visibility
    tags: List[str]
    shared_with: List[GrantResponse]
    version: int
    created_at: datetime
    last_modified: datetime
    word_count: int
    content_length: int

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            title=document.title,
            content=document.content,
            author_id=document.author_id,
            visibility=document.visibility,
            tags=list(document.tags),
            shared_with=[GrantResponse.model_validate(grant) for grant in document.shared_with],
            version=document.version,
            created_at=document.created_at,
            last_modified=document.last_modified,
            word_count=document.get_word_count(),
            content_length=document.get_content_length()
        )


class DocumentMutationResponse(BaseModel):
    """Документ после изменения и получатели, которых не удалось уведомить"""
    success: bool = True
    document: DocumentResponse
    failed_notifications: List[uuid.UUID] = Field(default_factory=list)


class DocumentListResponse(BaseModel):
    """Схема для списка документов"""
    success: bool = True
    documents: List[DocumentResponse]
    total: int
    total_pages: int
    current_page: int


class HistoryEntryResponse(BaseModel):
    actor_id: uuid.UUID
    action: HistoryAction
    changes: Dict[str, Any]
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            actor_id=entry.actor_id,
            action=entry.action,
            changes=entry.changes_dict,
            timestamp=entry.timestamp
        )


class DocumentInfo(BaseModel):
    title: str
    current_visibility: Visibility
    current_tags: List[str]


class DocumentHistoryResponse(BaseModel):
    """История правок, новые записи первыми"""
    success: bool = True
    history: List[HistoryEntryResponse]
    document_info: DocumentInfo
