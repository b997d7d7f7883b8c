"""Shared test fixtures for taskkeeper."""

import pytest

from taskkeeper.auth.guard import AccessGuard
from taskkeeper.auth.schemas import UserCredentials
from taskkeeper.auth.service import AuthService
from taskkeeper.config import Settings
from taskkeeper.db import SCHEMA_PATH, Database, create_connection
from taskkeeper.main import create_app
from taskkeeper.tasks.service import TaskService

TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "TestPass123"


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = create_connection(":memory:")
    db.executescript(SCHEMA_PATH.read_text())
    db.commit()

    yield db

    db.close()


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a temp-file database with cheap bcrypt."""
    return Settings(
        database_path=str(tmp_path / "taskkeeper.db"),
        jwt_secret_key=TEST_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def database(test_settings):
    """Initialized temp-file database."""
    db = Database(test_settings.database_path)
    db.init_db()
    return db


@pytest.fixture
def auth_service(database, test_settings):
    return AuthService(
        database,
        secret_key=test_settings.jwt_secret_key,
        token_expiry_seconds=test_settings.jwt_expiry_seconds,
        bcrypt_rounds=test_settings.bcrypt_rounds,
    )


@pytest.fixture
def task_service(database):
    return TaskService(database)


@pytest.fixture
def guard(auth_service, test_settings):
    return AccessGuard(auth_service, secret_key=test_settings.jwt_secret_key)


@pytest.fixture
def alice(auth_service):
    """Registered user 'alice'."""
    return auth_service.register(UserCredentials(username="alice", password=TEST_PASSWORD))


@pytest.fixture
def bob(auth_service):
    """Registered user 'bob'."""
    return auth_service.register(UserCredentials(username="bob_b", password=TEST_PASSWORD))


@pytest.fixture
def app(test_settings):
    """Flask app wired against the temp-file database."""
    application = create_app(test_settings)
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    """Create test client for API testing."""
    with app.test_client() as client:
        yield client


def register_and_login(client, username: str, password: str = TEST_PASSWORD) -> dict:
    """Register a user over HTTP and return Authorization headers."""
    response = client.post("/auth/register", json={"username": username, "password": password})
    assert response.status_code == 201
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    """Authorization headers for user 'alice'."""
    return register_and_login(client, "alice")


@pytest.fixture
def other_headers(client):
    """Authorization headers for a second user 'bob_b'."""
    return register_and_login(client, "bob_b")


@pytest.fixture
def login_as(client):
    """Register + login helper: login_as("carol") -> auth headers."""
    def _login_as(username: str, password: str = TEST_PASSWORD) -> dict:
        return register_and_login(client, username, password)
    return _login_as
