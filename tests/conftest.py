"""
Pytest fixtures: временная SQLite-база, пользователи и сервисы
"""
import logging
from types import SimpleNamespace

import pytest

from docshare.core.config import Settings
from docshare.core.db import Database
from docshare.db.repositories import DocumentRepository, NotificationRepository, UserRepository
from docshare.domains.documents.services import DocumentService
from docshare.domains.identity.services import IdentityService
from docshare.domains.notifications.services import NotificationService


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """В тестах показываем только ошибки"""
    logging.getLogger().setLevel(logging.ERROR)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'docshare-test.db'}",
        jwt_secret="test-secret",
        dependency_timeout=2.0,
        max_write_retries=3,
        notifications_page_size=20,
        documents_page_size=10,
        log_level="ERROR"
    )


@pytest.fixture
async def database(settings):
    database = Database(settings.database_url)
    database.open()
    await database.create_all()
    yield database
    await database.close()


@pytest.fixture
def user_repository(database):
    return UserRepository(database)


@pytest.fixture
def document_repository(database):
    return DocumentRepository(database)


@pytest.fixture
def notification_repository(database):
    return NotificationRepository(database)


@pytest.fixture
async def users(user_repository):
    """Пользователи для сценариев: alice, bob, carol, john, johnny"""
    return SimpleNamespace(
        alice=await user_repository.create("Alice Cooper", "alice@example.com"),
        bob=await user_repository.create("Bob Marley", "bob@example.com"),
        carol=await user_repository.create("Carol King", "carol@example.com"),
        john=await user_repository.create("John Smith", "john@example.com"),
        johnny=await user_repository.create("Johnny Walker", "johnny@example.com"),
    )


@pytest.fixture
def notification_service(notification_repository, settings):
    return NotificationService(
        notification_repository,
        timeout=settings.dependency_timeout,
        page_size=settings.notifications_page_size
    )


@pytest.fixture
def document_service(document_repository, user_repository, notification_service, settings):
    return DocumentService(document_repository, user_repository, notification_service, settings)


@pytest.fixture
def identity_service(user_repository, settings):
    return IdentityService(user_repository, timeout=settings.dependency_timeout)
