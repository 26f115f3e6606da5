import uuid
from datetime import datetime
from typing import List, Optional

from docshare.domains.documents.entities import (
    CONTENT_CREATED, ChangeSet, ContentChange, Document, DocumentPatch, FieldChange,
    HistoryAction, HistoryEntry, TagsChange, TitleChange, VisibilityChange
)


def diff(existing: Document, proposed: DocumentPatch) -> ChangeSet:
    """Поля из proposed, значение которых отличается от текущего"""
    changes: List[FieldChange] = []

    if proposed.title is not None and proposed.title != existing.title:
        changes.append(TitleChange(title=proposed.title))
    if proposed.content is not None and proposed.content != existing.content:
        changes.append(ContentChange())
    if proposed.visibility is not None and proposed.visibility != existing.visibility:
        changes.append(VisibilityChange(visibility=proposed.visibility))
    if proposed.tags is not None and tuple(proposed.tags) != tuple(existing.tags):
        changes.append(TagsChange(tags=tuple(proposed.tags)))

    return tuple(changes)


def record(
    existing: Document,
    proposed: DocumentPatch,
    actor_id: uuid.UUID,
    now: datetime
) -> Optional[HistoryEntry]:
    """Запись истории для обновления или None, если обновление пустое"""
    changes = diff(existing, proposed)
    if not changes:
        return None
    return HistoryEntry(actor_id=actor_id, action=HistoryAction.UPDATE, changes=changes, timestamp=now)


def changed_fields(existing: Document, proposed: DocumentPatch) -> DocumentPatch:
    """Часть proposed, которая действительно меняет документ"""
    fields = {type(change).field for change in diff(existing, proposed)}
    return DocumentPatch(
        title=proposed.title if "title" in fields else None,
        content=proposed.content if "content" in fields else None,
        visibility=proposed.visibility if "visibility" in fields else None,
        tags=tuple(proposed.tags) if "tags" in fields else None
    )


def creation_entry(document: Document) -> HistoryEntry:
    """Синтетическая запись о создании; в хранилище не сохраняется"""
    return HistoryEntry(
        actor_id=document.author_id,
        action=HistoryAction.CREATE,
        changes=(
            TitleChange(title=document.title),
            ContentChange(summary=CONTENT_CREATED),
            VisibilityChange(visibility=document.visibility),
            TagsChange(tags=tuple(document.tags)),
        ),
        timestamp=document.created_at
    )


def full_history(document: Document) -> List[HistoryEntry]:
    """Полная история, новые записи первыми"""
    entries = [creation_entry(document), *document.edit_history]
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
