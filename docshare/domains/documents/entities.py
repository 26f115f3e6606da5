import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


CONTENT_UPDATED = "Content updated"
CONTENT_CREATED = "Document created"


class Permission(str, Enum):
    """Уровень доступа к документу"""
    VIEW = "view"
    EDIT = "edit"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class HistoryAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class Grant:
    """Запись в списке доступа документа: один пользователь, один уровень"""
    user_id: uuid.UUID
    permission: Permission


# Изменения в истории: закрытый набор вариантов, по одному на поле

@dataclass(frozen=True)
class TitleChange:
    field: ClassVar[str] = "title"
    title: str

    @property
    def value(self) -> Any:
        return self.title


@dataclass(frozen=True)
class ContentChange:
    """Содержимое не копируется в историю, только маркер"""
    field: ClassVar[str] = "content"
    summary: str = CONTENT_UPDATED

    @property
    def value(self) -> Any:
        return self.summary


@dataclass(frozen=True)
class VisibilityChange:
    field: ClassVar[str] = "visibility"
    visibility: Visibility

    @property
    def value(self) -> Any:
        return self.visibility.value


@dataclass(frozen=True)
class TagsChange:
    field: ClassVar[str] = "tags"
    tags: Tuple[str, ...]

    @property
    def value(self) -> Any:
        return list(self.tags)


FieldChange = Union[TitleChange, ContentChange, VisibilityChange, TagsChange]
ChangeSet = Tuple[FieldChange, ...]


def changes_to_dict(changes: ChangeSet) -> Dict[str, Any]:
    """Сериализация набора изменений в {поле: значение}"""
    return {change.field: change.value for change in changes}


def changes_from_dict(data: Dict[str, Any]) -> ChangeSet:
    """Восстановление набора изменений из хранимого словаря"""
    changes = []
    if "title" in data:
        changes.append(TitleChange(title=data["title"]))
    if "content" in data:
        changes.append(ContentChange(summary=data["content"]))
    if "visibility" in data:
        changes.append(VisibilityChange(visibility=Visibility(data["visibility"])))
    if "tags" in data:
        changes.append(TagsChange(tags=tuple(data["tags"] or ())))
    return tuple(changes)


@dataclass(frozen=True)
class HistoryEntry:
    """Неизменяемая запись истории правок"""
    actor_id: uuid.UUID
    action: HistoryAction
    changes: ChangeSet
    timestamp: datetime

    @property
    def changes_dict(self) -> Dict[str, Any]:
        return changes_to_dict(self.changes)


@dataclass(frozen=True)
class Document:
    """Снимок агрегата документа на момент чтения.

    Снимок не изменяется на месте: любая мутация оформляется как
    DocumentPatch и записывается условно по `version`.
    """
    id: uuid.UUID
    title: str
    content: str
    author_id: uuid.UUID
    visibility: Visibility = Visibility.PRIVATE
    tags: Tuple[str, ...] = ()
    shared_with: Tuple[Grant, ...] = ()
    edit_history: Tuple[HistoryEntry, ...] = ()
    is_deleted: bool = False
    version: int = 1
    created_at: Optional[datetime] = None
    last_modified: Optional[datetime] = None

    def grant_for(self, user_id: Optional[uuid.UUID]) -> Optional[Grant]:
        if user_id is None:
            return None
        for grant in self.shared_with:
            if grant.user_id == user_id:
                return grant
        return None

    def is_author(self, user_id: Optional[uuid.UUID]) -> bool:
        return user_id is not None and user_id == self.author_id

    def get_word_count(self) -> int:
        """Подсчет количества слов в документе"""
        if not self.content.strip():
            return 0
        return len(self.content.split())

    def get_content_length(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class DocumentPatch:
    """Частичное изменение документа; None означает "поле не меняется".

    `shared_with` заменяет список доступа целиком, `append_history`
    добавляет одну запись в конец истории.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    visibility: Optional[Visibility] = None
    tags: Optional[Tuple[str, ...]] = None
    shared_with: Optional[Tuple[Grant, ...]] = None
    append_history: Optional[HistoryEntry] = None
    is_deleted: Optional[bool] = None
    last_modified: Optional[datetime] = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


@dataclass
class DocumentFilter:
    """Фильтр выборки документов; удаленные документы не выбираются"""
    accessible_to: Optional[uuid.UUID] = None
    search: Optional[str] = None


@dataclass
class DocumentPage:
    documents: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 10

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page
