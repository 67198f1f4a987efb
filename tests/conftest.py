import os
import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# SQLite pour les tests, avant tout import de l'app
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ.setdefault("DATABASE_URL", SQLALCHEMY_TEST_DATABASE_URL)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database AVANT d'importer app
import todo_app.core.database
todo_app.core.database.engine = test_engine
todo_app.core.database.SessionLocal = TestingSessionLocal

# Maintenant importer app (qui utilisera notre engine SQLite)
from todo_app.core.database import Base, get_db
from todo_app.main import app
from todo_app.services.document_store import DocumentStore
from todo_app.services.identity import AuthSession
from todo_app.services.task_repository import TaskRepository

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)

# Override la dépendance
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    """Client de test FastAPI"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def session(db):
    """Session connectée avec un utilisateur de test"""
    session = AuthSession(db)
    session.sign_up("alice@example.com", "pass123")
    return session


@pytest.fixture
def repository(store, session):
    return TaskRepository(store, session)


@pytest.fixture
def make_token(client):
    """Inscrit + connecte un utilisateur, retourne son access_token"""
    def _make_token(email, password="pass123"):
        client.post("/auth/signup", json={"email": email, "password": password})
        response = client.post("/auth/login", json={"email": email, "password": password})
        return response.json()["access_token"]
    return _make_token


@pytest.fixture
def auth_token(make_token):
    """Crée un utilisateur et retourne son token JWT"""
    return make_token("test@example.com")


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}
