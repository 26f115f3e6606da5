"""Тесты HTTP-слоя через FastAPI TestClient."""
import asyncio
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from docshare.core.db import Database
from docshare.core.security import create_access_token
from docshare.db.repositories import UserRepository
from docshare.main import create_app


@pytest.fixture
def accounts(settings):
    """Пользователи создаются до старта приложения в отдельном цикле событий"""

    async def seed():
        database = Database(settings.database_url)
        database.open()
        try:
            await database.create_all()
            repository = UserRepository(database)
            return SimpleNamespace(
                alice=await repository.create("Alice Cooper", "alice@example.com"),
                bob=await repository.create("Bob Marley", "bob@example.com"),
            )
        finally:
            await database.close()

    return asyncio.run(seed())


@pytest.fixture
def client(settings, accounts):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def auth(settings, accounts):
    def headers(user):
        token = create_access_token({"sub": str(user.id)}, settings)
        return {"Authorization": f"Bearer {token}"}

    return SimpleNamespace(alice=headers(accounts.alice), bob=headers(accounts.bob))


def create_document(client, headers, **overrides):
    payload = {"title": "Plan", "content": "Draft", "visibility": "private", "tags": ["q1"]}
    payload.update(overrides)
    response = client.post("/api/documents", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["document"]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestDocumentsApi:

    def test_create_requires_token(self, client):
        response = client.post("/api/documents", json={"title": "T", "content": "C"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required"}

    def test_invalid_token_is_anonymous(self, client):
        response = client.get("/api/documents", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_validation_errors_have_field_detail(self, client, auth):
        response = client.post("/api/documents", json={"title": "   ", "content": "C"}, headers=auth.alice)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert [error["field"] for error in body["errors"]] == ["title"]

    def test_create_and_read(self, client, auth):
        document = create_document(client, auth.alice, content="two words")

        response = client.get(f"/api/documents/{document['id']}", headers=auth.alice)

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Plan"
        assert body["word_count"] == 2
        assert body["version"] == 1

    def test_private_document_access(self, client, auth):
        document = create_document(client, auth.alice)

        assert client.get(f"/api/documents/{document['id']}").status_code == 401
        assert client.get(f"/api/documents/{document['id']}", headers=auth.bob).status_code == 403

    def test_public_document_anonymous_read(self, client, auth):
        document = create_document(client, auth.alice, visibility="public")

        assert client.get(f"/api/documents/{document['id']}").status_code == 200

    def test_unknown_document(self, client, auth):
        response = client.get(f"/api/documents/{uuid.uuid4()}", headers=auth.alice)

        assert response.status_code == 404
        assert response.json()["message"] == "Document not found"

    def test_share_update_and_history(self, client, auth, accounts):
        document = create_document(client, auth.alice)

        shared = client.post(
            f"/api/documents/{document['id']}/share",
            json={"email": "bob@example.com", "permission": "edit"},
            headers=auth.alice
        )
        assert shared.status_code == 200
        assert shared.json()["document"]["shared_with"] == [
            {"user_id": str(accounts.bob.id), "permission": "edit"}
        ]
        assert shared.json()["failed_notifications"] == []

        updated = client.put(
            f"/api/documents/{document['id']}", json={"content": "Bob was here"}, headers=auth.bob
        )
        assert updated.status_code == 200
        assert updated.json()["document"]["version"] == 3

        history = client.get(f"/api/documents/{document['id']}/history", headers=auth.alice)
        assert history.status_code == 200
        body = history.json()
        assert [entry["action"] for entry in body["history"]] == ["update", "create"]
        assert body["history"][0]["changes"] == {"content": "Content updated"}
        assert body["document_info"]["current_tags"] == ["q1"]

        assert client.get(f"/api/documents/{document['id']}/history", headers=auth.bob).status_code == 403

    def test_share_with_invalid_email(self, client, auth):
        document = create_document(client, auth.alice)

        response = client.post(
            f"/api/documents/{document['id']}/share", json={"email": "not-an-email"}, headers=auth.alice
        )

        assert response.status_code == 400

    def test_unshare_and_delete(self, client, auth, accounts):
        document = create_document(client, auth.alice)
        client.post(
            f"/api/documents/{document['id']}/share", json={"email": "bob@example.com"}, headers=auth.alice
        )

        unshared = client.delete(f"/api/documents/{document['id']}/share/{accounts.bob.id}", headers=auth.alice)
        assert unshared.status_code == 200
        assert unshared.json()["document"]["shared_with"] == []

        assert client.delete(f"/api/documents/{document['id']}", headers=auth.bob).status_code == 403
        assert client.delete(f"/api/documents/{document['id']}", headers=auth.alice).status_code == 200
        assert client.get(f"/api/documents/{document['id']}", headers=auth.alice).status_code == 404

    def test_list_documents(self, client, auth):
        create_document(client, auth.alice, title="Mine")
        create_document(client, auth.bob, title="Bob public", visibility="public")
        create_document(client, auth.bob, title="Bob private")

        response = client.get("/api/documents", headers=auth.alice)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert {item["title"] for item in body["documents"]} == {"Mine", "Bob public"}


class TestNotificationsApi:

    def test_mention_notification_lifecycle(self, client, auth):
        create_document(client, auth.alice, title="Launch", content="Hey @bob")

        listing = client.get("/api/notifications", headers=auth.bob)
        assert listing.status_code == 200
        body = listing.json()
        assert body["unread_count"] == 1
        notification = body["notifications"][0]
        assert notification["type"] == "mention"
        assert notification["message"] == 'Alice Cooper mentioned you in "Launch"'

        check = client.get("/api/notifications/check", headers=auth.bob)
        assert check.json()["has_new"] is True

        assert client.put(f"/api/notifications/{notification['id']}/read", headers=auth.alice).status_code == 404

        read = client.put(f"/api/notifications/{notification['id']}/read", headers=auth.bob)
        assert read.status_code == 200
        assert read.json()["notification"]["is_read"] is True

    def test_read_all(self, client, auth):
        create_document(client, auth.alice, content="@bob first")
        create_document(client, auth.alice, content="@bob second")

        response = client.put("/api/notifications/read-all", headers=auth.bob)

        assert response.json()["updated"] == 2
        assert client.get("/api/notifications", headers=auth.bob).json()["unread_count"] == 0


class TestUsersApi:

    def test_search_requires_two_characters(self, client, auth):
        response = client.get("/api/users/search", params={"q": "b"}, headers=auth.alice)

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Search query must be at least 2 characters"

    def test_search(self, client, auth, accounts):
        response = client.get("/api/users/search", params={"q": "bo"}, headers=auth.alice)

        assert response.status_code == 200
        assert response.json()["users"] == [
            {"id": str(accounts.bob.id), "name": "Bob Marley", "email": "bob@example.com"}
        ]

    def test_profile(self, client, auth, accounts):
        assert client.get(f"/api/users/profile/{accounts.alice.id}", headers=auth.bob).json()["name"] == "Alice Cooper"
        assert client.get(f"/api/users/profile/{uuid.uuid4()}", headers=auth.bob).status_code == 404
