"""Тесты для SQLAlchemy-репозиториев."""
import uuid
from datetime import datetime, timezone

import pytest

from docshare.core.errors import VersionConflict
from docshare.domains.documents.entities import (
    ContentChange, Document, DocumentFilter, DocumentPatch, Grant, HistoryAction, HistoryEntry,
    Permission, Visibility
)
from docshare.domains.documents.mentions import extract_mentions


def make_document(author, title="Doc", **overrides):
    now = datetime.now(timezone.utc)
    values = dict(
        id=uuid.uuid4(),
        title=title,
        content="Body",
        author_id=author.id,
        created_at=now,
        last_modified=now
    )
    values.update(overrides)
    return Document(**values)


class TestUserRepository:

    async def test_find_by_email_is_case_insensitive(self, user_repository, users):
        found = await user_repository.find_by_email("  Alice@Example.com ")
        assert found == users.alice

    async def test_duplicate_email_rejected(self, user_repository, users):
        with pytest.raises(ValueError):
            await user_repository.create("Other Alice", "ALICE@example.com")

    async def test_name_prefix_matches_first_word_only(self, user_repository, users):
        """Совпадение только по началу первого слова имени."""
        assert [user.id for user in await user_repository.find_by_name_prefix("john")] == [
            users.john.id, users.johnny.id
        ]
        assert await user_repository.find_by_name_prefix("smith") == []
        assert await user_repository.find_by_name_prefix("john smith") == []

    async def test_name_prefix_folds_non_ascii_case(self, user_repository, users):
        """Упоминание в нижнем регистре находит имя с заглавной буквой не из ASCII."""
        elodie = await user_repository.create("Élodie Dupont", "elodie@example.com")
        await user_repository.create("Ölaf Berg", "olaf@example.com")

        found = await user_repository.find_by_name_prefix(extract_mentions("hi @élodie")[0])

        assert [user.id for user in found] == [elodie.id]
        assert [user.id for user in await user_repository.find_by_name_prefix("ÉLO")] == [elodie.id]

    async def test_name_prefix_escapes_wildcards(self, user_repository, users):
        assert await user_repository.find_by_name_prefix("%") == []
        assert await user_repository.find_by_name_prefix("_ob") == []

    async def test_search_excludes_requester(self, user_repository, users):
        results = await user_repository.search("jo", exclude_id=users.john.id)
        assert [user.id for user in results] == [users.johnny.id]

    async def test_search_treats_wildcards_literally(self, user_repository, users):
        assert await user_repository.search("e_") == []
        assert await user_repository.search("%") == []


class TestDocumentRepository:

    async def test_create_and_get(self, document_repository, users):
        document = make_document(
            users.alice,
            tags=("x", "y"),
            shared_with=(Grant(user_id=users.bob.id, permission=Permission.EDIT),)
        )

        await document_repository.create(document)
        loaded = await document_repository.get(document.id)

        assert loaded.title == "Doc"
        assert loaded.tags == ("x", "y")
        assert loaded.shared_with == (Grant(user_id=users.bob.id, permission=Permission.EDIT),)
        assert loaded.version == 1
        assert loaded.created_at.tzinfo is not None

    async def test_get_missing(self, document_repository):
        assert await document_repository.get(uuid.uuid4()) is None

    async def test_conditional_update_bumps_version_and_appends_history(self, document_repository, users):
        document = await document_repository.create(make_document(users.alice))
        entry = HistoryEntry(
            actor_id=users.alice.id,
            action=HistoryAction.UPDATE,
            changes=(ContentChange(),),
            timestamp=datetime.now(timezone.utc)
        )

        updated = await document_repository.conditional_update(
            document.id, 1, DocumentPatch(content="New body", append_history=entry)
        )

        assert updated.version == 2
        assert updated.content == "New body"
        assert updated.edit_history == (entry,)

    async def test_stale_version_rejected(self, document_repository, users):
        document = await document_repository.create(make_document(users.alice))
        await document_repository.conditional_update(document.id, 1, DocumentPatch(title="First"))

        with pytest.raises(VersionConflict):
            await document_repository.conditional_update(document.id, 1, DocumentPatch(title="Second"))

        assert (await document_repository.get(document.id)).title == "First"

    async def test_deleted_document_is_immutable(self, document_repository, users):
        document = await document_repository.create(make_document(users.alice))
        deleted = await document_repository.conditional_update(document.id, 1, DocumentPatch(is_deleted=True))

        with pytest.raises(VersionConflict):
            await document_repository.conditional_update(document.id, deleted.version, DocumentPatch(title="x"))

    async def test_shared_with_replaced_wholesale(self, document_repository, users):
        document = await document_repository.create(make_document(
            users.alice, shared_with=(Grant(user_id=users.bob.id, permission=Permission.VIEW),)
        ))

        updated = await document_repository.conditional_update(
            document.id, 1,
            DocumentPatch(shared_with=(Grant(user_id=users.carol.id, permission=Permission.EDIT),))
        )

        assert updated.shared_with == (Grant(user_id=users.carol.id, permission=Permission.EDIT),)

    async def test_list_accessible_excludes_deleted(self, document_repository, users):
        visible = await document_repository.create(make_document(users.alice, visibility=Visibility.PUBLIC))
        gone = await document_repository.create(make_document(users.alice, visibility=Visibility.PUBLIC))
        await document_repository.conditional_update(gone.id, 1, DocumentPatch(is_deleted=True))

        page = await document_repository.list(DocumentFilter(accessible_to=users.bob.id))

        assert [document.id for document in page.documents] == [visible.id]

    async def test_search_matches_title_or_content(self, document_repository, users):
        await document_repository.create(make_document(users.alice, title="Budget"))
        await document_repository.create(make_document(users.alice, title="Misc", content="budget draft"))
        await document_repository.create(make_document(users.alice, title="Other"))

        page = await document_repository.list(DocumentFilter(accessible_to=users.alice.id, search="budget"))

        assert page.total == 2

    async def test_search_treats_wildcards_literally(self, document_repository, users):
        """Символы % и _ в запросе ищутся как обычные символы."""
        discount = await document_repository.create(make_document(users.alice, title="50% discount"))
        await document_repository.create(make_document(users.alice, title="500 units"))
        snake = await document_repository.create(make_document(users.alice, title="a_b notes"))
        await document_repository.create(make_document(users.alice, title="axb notes"))

        percent = await document_repository.list(DocumentFilter(accessible_to=users.alice.id, search="50%"))
        underscore = await document_repository.list(DocumentFilter(accessible_to=users.alice.id, search="a_b"))

        assert [document.id for document in percent.documents] == [discount.id]
        assert [document.id for document in underscore.documents] == [snake.id]
