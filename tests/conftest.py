"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from common.job_queue import JobQueue
from common.metadata_store import MetadataStore
from common.repositories.file_repository import FileRepository
from common.repositories.user_repository import UserRepository
from common.storage import LocalStorage
from common.token_store import TokenStore
from server.main import create_app
from server.services.auth_service import AuthService
from server.services.file_service import FileService
from tests.fakes import FakeDatabase, FakeRedis
from tests.helpers import basic_auth_header, make_png


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def token_store(fake_redis):
    return TokenStore(fake_redis)


@pytest.fixture
def job_queue(fake_redis):
    return JobQueue(fake_redis)


@pytest.fixture
def metadata_store(fake_db):
    return MetadataStore(fake_db)


@pytest.fixture
def storage(tmp_path):
    """
    Local storage rooted in a directory that does not exist yet.
    """
    return LocalStorage(str(tmp_path / 'files_manager'))


@pytest.fixture
def user_repo(metadata_store):
    return UserRepository(metadata_store)


@pytest.fixture
def file_repo(metadata_store):
    return FileRepository(metadata_store)


@pytest.fixture
def auth_service(user_repo, token_store):
    return AuthService(user_repo, token_store)


@pytest.fixture
def file_service(file_repo, job_queue, storage):
    return FileService(file_repo, job_queue, storage)


@pytest.fixture
def app(token_store, job_queue, metadata_store, storage):
    """
    Application wired to the in-memory stores.
    """
    application = create_app()
    application.state.token_store = token_store
    application.state.job_queue = job_queue
    application.state.metadata_store = metadata_store
    application.state.storage = storage
    return application


@pytest.fixture
def client(app):
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def session(client):
    """
    Register a user, log in, and return (user_id, headers) for the session.
    """
    response = client.post('/users', json={'email': 'bob@dylan.com', 'password': 'toto1234!'})
    assert response.status_code == 201
    user_id = response.json()['id']

    response = client.get('/connect', headers=basic_auth_header('bob@dylan.com', 'toto1234!'))
    assert response.status_code == 200
    return user_id, {'X-Token': response.json()['token']}
