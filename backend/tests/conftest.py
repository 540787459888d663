"""
Configuration partagée pour tous les tests.

- `client` : TestClient avec BDD mockée (MagicMock) et utilisateur connecté simulé.
- `engine` / `db` / `api` : vraie BDD SQLite en mémoire pour les scénarios de bout en bout.
- `fake_auth` / `fake_store` / `gate` : doublures pour les vues client.
- `run` : exécute une coroutine dans une boucle asyncio neuve.
"""

import asyncio
import os

# Doit précéder tout import de registry (Settings lu à l'import)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import uuid
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from registry.client.auth_client import SIGNED_IN, SIGNED_OUT
from registry.client.navigation import Navigator, Notifier
from registry.client.session_gate import SessionGate
from registry.database import get_db, init_db
from registry.dependencies import get_current_user
from registry.errors import DuplicateKey, NotFound
from registry.main import app
from registry.schemas.auth import UserResponse
from registry.schemas.student import StudentResponse
from registry.services import auth_service


def make_user(**kwargs) -> MagicMock:
    u = MagicMock()
    u.id = kwargs.get("id", uuid.uuid4())
    u.email = kwargs.get("email", "ana@escola.br")
    u.created_at = kwargs.get("created_at", datetime.now())
    return u


@pytest.fixture
def current_user():
    return make_user()


@pytest.fixture
def client(current_user):
    """Client HTTP de test avec la BDD mockée et l'utilisateur déjà authentifié."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_user] = lambda: current_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# --- Vraie BDD SQLite ---

@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def owner(db):
    return auth_service.sign_up(db, "ana@escola.br", "segredo123")


@pytest.fixture
def other_owner(db):
    return auth_service.sign_up(db, "bruno@escola.br", "segredo456")


@pytest.fixture
def override_db(session_factory):
    """Branche l'application sur la BDD SQLite du test."""
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def api(override_db):
    """TestClient branché sur la BDD SQLite (authentification réelle)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(api):
    """Crée le compte (si besoin), se connecte et retourne l'en-tête Authorization."""
    def _login(email="ana@escola.br", password="segredo123") -> dict:
        api.post("/api/v1/auth/signup", json={"email": email, "password": password})
        resp = api.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


# --- Doublures pour les vues client ---

class FakeAuth:
    """Fournisseur d'authentification en mémoire."""

    def __init__(self, user=None):
        self.user = user
        self.access_token = "jeton" if user else None
        self.sign_out_calls = 0
        self._listeners = []

    def on_auth_state_change(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def get_current_user(self):
        return self.user

    async def sign_in(self, email, password):
        self.user = UserResponse(id=uuid.uuid4(), email=email, created_at=datetime.now())
        self.access_token = "jeton"
        for listener in list(self._listeners):
            await listener(SIGNED_IN, self.user)
        return self.user

    async def sign_out(self):
        self.sign_out_calls += 1
        self.user = None
        self.access_token = None
        for listener in list(self._listeners):
            await listener(SIGNED_OUT, None)


class FakeStore:
    """Registre en mémoire ; `fail_with` force une erreur sur le prochain appel."""

    def __init__(self, owner_id=None):
        self.owner_id = owner_id or uuid.uuid4()
        self.rows = {}
        self.calls = []
        self.fail_with = None

    def _maybe_fail(self):
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    def add(self, **kwargs) -> StudentResponse:
        student = StudentResponse(
            id=kwargs.get("id", uuid.uuid4()),
            owner_id=self.owner_id,
            name=kwargs.get("name", "Ana Silva"),
            matricula=kwargs.get("matricula", "2024001"),
            course=kwargs.get("course", "Engenharia"),
            age=kwargs.get("age", 20),
            birth_date=kwargs.get("birth_date", "2004-05-01"),
            created_at=kwargs.get("created_at", datetime.now()),
        )
        self.rows[student.id] = student
        return student

    async def list(self):
        self.calls.append(("list",))
        self._maybe_fail()
        return sorted(self.rows.values(), key=lambda s: s.created_at, reverse=True)

    async def get_by_id(self, student_id):
        self.calls.append(("get_by_id", student_id))
        self._maybe_fail()
        if student_id not in self.rows:
            raise NotFound()
        return self.rows[student_id]

    async def insert(self, record):
        self.calls.append(("insert", record))
        self._maybe_fail()
        if any(s.matricula == record.matricula for s in self.rows.values()):
            raise DuplicateKey()
        return self.add(**record.model_dump())

    async def update(self, student_id, record):
        self.calls.append(("update", student_id, record))
        self._maybe_fail()
        if student_id not in self.rows:
            raise NotFound()
        current = self.rows[student_id]
        self.rows[student_id] = current.model_copy(update=record.model_dump())

    async def delete(self, student_id):
        self.calls.append(("delete", student_id))
        self._maybe_fail()
        if student_id not in self.rows:
            raise NotFound()
        del self.rows[student_id]


@pytest.fixture
def signed_user():
    return UserResponse(id=uuid.uuid4(), email="ana@escola.br", created_at=datetime.now())


@pytest.fixture
def fake_auth(signed_user):
    return FakeAuth(signed_user)


@pytest.fixture
def fake_store(signed_user):
    return FakeStore(signed_user.id)


@pytest.fixture
def gate(fake_auth):
    return SessionGate(fake_auth)


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def anonymous_auth():
    return FakeAuth(None)


@pytest.fixture
def run():
    """Exécute une coroutine jusqu'au bout (pas de pytest-asyncio)."""
    return asyncio.run
