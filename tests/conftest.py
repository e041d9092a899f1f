import os

# banco em memória e URL pública fixa antes de carregar settings
os.environ["DB_URL"] = "sqlite://"
os.environ["PUBLIC_BASE_URL"] = "https://edutok.test"

import pytest
from fastapi.testclient import TestClient

from database.db import Base, SessionLocal, engine, init_db
from dependencies.security import get_clock
from main import app
from models.students import StudentProfile
from services.errors import Unauthorized
from services.identity import Identity, get_identity_verifier

NOW_MS = 1_700_000_000_000
STUDENT_TOKEN = "token-aluno"
STUDENT_UID = "uid-aluno-1"


class FakeVerifier:
    def __init__(self, tokens):
        self.tokens = tokens

    def verify(self, token):
        if token not in self.tokens:
            raise Unauthorized()
        return self.tokens[token]


class FakeClock:
    def __init__(self, now=NOW_MS):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def student_profile(db):
    db.add(StudentProfile(uid=STUDENT_UID, display_name="Ana Souza", cpf="123.456.789-09", turma="3re1"))
    db.commit()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(clock):
    verifier = FakeVerifier({STUDENT_TOKEN: Identity(uid=STUDENT_UID, claims={"uid": STUDENT_UID})})
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {STUDENT_TOKEN}"}
