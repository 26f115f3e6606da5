"""Тесты для resolve_access и проверок доступа."""
import uuid

import pytest

from docshare.core.errors import AccessDenied, AuthenticationRequired, NotFound
from docshare.domains.documents.access import ensure_access, ensure_author, resolve_access
from docshare.domains.documents.entities import Document, Grant, Permission, Visibility

AUTHOR = uuid.uuid4()
VIEWER = uuid.uuid4()
EDITOR = uuid.uuid4()
STRANGER = uuid.uuid4()


def make_document(visibility=Visibility.PRIVATE, is_deleted=False):
    return Document(
        id=uuid.uuid4(),
        title="Plan",
        content="Quarterly plan",
        author_id=AUTHOR,
        visibility=visibility,
        shared_with=(
            Grant(user_id=VIEWER, permission=Permission.VIEW),
            Grant(user_id=EDITOR, permission=Permission.EDIT),
        ),
        is_deleted=is_deleted
    )


class TestResolveAccess:
    """Правила доступа по порядку применения."""

    @pytest.mark.parametrize("visibility", list(Visibility))
    @pytest.mark.parametrize("required", list(Permission))
    def test_author_always_has_edit(self, visibility, required):
        """Автор получает edit независимо от видимости и списка доступа."""
        decision = resolve_access(make_document(visibility), AUTHOR, required)
        assert decision.granted
        assert decision.effective_permission == Permission.EDIT

    @pytest.mark.parametrize("requester", [None, STRANGER, VIEWER])
    def test_public_document_viewable_by_everybody(self, requester):
        """Публичный документ доступен на чтение всем, включая анонимов."""
        decision = resolve_access(make_document(Visibility.PUBLIC), requester, Permission.VIEW)
        assert decision.granted

    def test_public_document_does_not_grant_edit(self):
        decision = resolve_access(make_document(Visibility.PUBLIC), STRANGER, Permission.EDIT)
        assert not decision.granted
        assert not decision.not_found

    @pytest.mark.parametrize("required", list(Permission))
    def test_private_document_denies_stranger(self, required):
        decision = resolve_access(make_document(), STRANGER, required)
        assert not decision.granted
        assert decision.effective_permission is None

    def test_anonymous_denied_on_private_document(self):
        assert not resolve_access(make_document(), None, Permission.VIEW).granted

    def test_view_grant_allows_view_only(self):
        document = make_document()
        view = resolve_access(document, VIEWER, Permission.VIEW)
        edit = resolve_access(document, VIEWER, Permission.EDIT)

        assert view.granted and view.effective_permission == Permission.VIEW
        assert not edit.granted
        assert edit.effective_permission == Permission.VIEW

    def test_edit_grant_allows_view_and_edit(self):
        document = make_document()
        assert resolve_access(document, EDITOR, Permission.VIEW).granted
        assert resolve_access(document, EDITOR, Permission.EDIT).granted

    @pytest.mark.parametrize("requester", [AUTHOR, EDITOR, None])
    def test_deleted_document_is_not_found_for_everybody(self, requester):
        """Удаленный документ не виден даже автору."""
        decision = resolve_access(make_document(Visibility.PUBLIC, is_deleted=True), requester)
        assert decision.not_found
        assert not decision.granted


class TestEnsureAccess:
    """Типизированные ошибки для вызывающего."""

    def test_missing_document(self):
        with pytest.raises(NotFound):
            ensure_access(None, AUTHOR)

    def test_deleted_document(self):
        with pytest.raises(NotFound):
            ensure_access(make_document(is_deleted=True), AUTHOR)

    def test_anonymous_requester_needs_authentication(self):
        with pytest.raises(AuthenticationRequired):
            ensure_access(make_document(), None)

    def test_authenticated_stranger_is_denied(self):
        with pytest.raises(AccessDenied):
            ensure_access(make_document(), STRANGER)

    def test_returns_decision_when_granted(self):
        decision = ensure_access(make_document(), EDITOR, Permission.EDIT)
        assert decision.effective_permission == Permission.EDIT


class TestEnsureAuthor:

    def test_editor_is_not_author(self):
        with pytest.raises(AccessDenied) as exc_info:
            ensure_author(make_document(), EDITOR, detail="Not authorized")
        assert exc_info.value.detail == "Not authorized"

    def test_author_passes(self):
        document = make_document()
        assert ensure_author(document, AUTHOR) is document

    def test_deleted_document_not_found_for_author(self):
        with pytest.raises(NotFound):
            ensure_author(make_document(is_deleted=True), AUTHOR)
