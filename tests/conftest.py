import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings
from database.db import get_db, init_db
from main import app
from models.students import Student as StudentModel

DEPT = "cme"
SEM = "4th semester"
SHIFT = "1st shift"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "API_TOKEN", "")

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def add_student(db, pin, short_pin, name=None, **overrides):
    fields = {
        "pin": pin,
        "short_pin": short_pin,
        "name": name or f"Student {pin}",
        "department": DEPT,
        "year": "2nd year",
        "semester": SEM,
        "shift": SHIFT,
        "status": "active",
    }
    fields.update(overrides)
    student = StudentModel(**fields)
    db.add(student)
    db.commit()
    return student


@pytest.fixture
def roster(db):
    """A, B, C in cme / 4th semester / 1st shift"""
    return [
        add_student(db, "A", "001", "Asha"),
        add_student(db, "B", "002", "Bala"),
        add_student(db, "C", "003", "Chitra"),
    ]


def mark_payload(**overrides):
    payload = {
        "department": DEPT,
        "semester": SEM,
        "shift": SHIFT,
        "subject": "SE",
        "period": 1,
        "date": "2024-01-01",
    }
    payload.update(overrides)
    return payload


SCOPE = {"department": DEPT, "semester": SEM, "shift": SHIFT}
