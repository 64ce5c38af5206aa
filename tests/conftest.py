import os
import sys
import tempfile
import uuid
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# Uploads locaux dans un dossier temporaire, jamais dans ./uploads
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="notely_test_"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Créer engine SQLite pour tests AVANT d'importer app
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database AVANT d'importer app
import notely.core.database
notely.core.database.engine = test_engine
notely.core.database.SessionLocal = TestingSessionLocal

# Maintenant importer app (qui utilisera notre engine SQLite)
from notely.core.database import Base, get_db
from notely.core.security import create_access_token
from notely.main import app
from notely.models.user import User

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


def create_user(prefix: str = "user") -> User:
    unique_id = str(uuid.uuid4())[:8]
    db = TestingSessionLocal()
    user = User(email=f"{prefix}{unique_id}@test.com", username=f"{prefix}{unique_id}", name=prefix)
    user.set_password("password123")
    db.add(user)
    db.commit()
    db.refresh(user)
    db.close()
    return user


@pytest.fixture
def test_user():
    return create_user("owner")


@pytest.fixture
def other_user():
    return create_user("intruder")


@pytest.fixture
def auth_headers(test_user):
    """Header Authorization pour test_user"""
    return {"Authorization": f"Bearer {create_access_token(test_user.id, test_user.email)}"}


@pytest.fixture
def other_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id, other_user.email)}"}


@pytest.fixture
def test_page(client, auth_headers):
    """Crée une page test"""
    response = client.post("/pages", headers=auth_headers, json={"title": "Test Page"})
    return response.json()
