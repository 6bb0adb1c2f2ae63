import os

# Point the app at SQLite before it builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.main import app
from app.db.session import get_db
from app.models.base import Base
from app.services.description_service import DescriptionGenerator, get_description_generator

# One in-memory database shared by every connection in a test
test_engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)


class FakeTextGenerator:
    """Records calls and returns canned text, or raises `error` when set."""

    def __init__(self, text: str = "A sweeping desert epic.", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[str, str, int]] = []

    def generate(self, system: str, prompt: str, max_tokens: int) -> str:
        self.calls.append((system, prompt, max_tokens))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture(autouse=True)
def setup_test_database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create a fresh database session for each test."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def fake_generator():
    return FakeTextGenerator()


@pytest.fixture
def test_client(fake_generator):
    """Create a test client with the store and the text provider swapped out."""

    def _get_test_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_description_generator] = lambda: DescriptionGenerator(
        fake_generator, max_tokens=100
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def book_data():
    return {
        "title": "Dune",
        "authors": "Frank Herbert",
        "publication_date": "1965",
        "publisher": "Chilton",
        "price": "12.99",
    }


@pytest.fixture
def sample_book(test_client, book_data):
    """Create a sample book through the API."""
    response = test_client.post("/api/books", json=book_data)
    assert response.status_code == 201, f"Failed to create sample book: {response.text}"
    return response.json()


@pytest.fixture
def make_books(test_client):
    """Create `n` books titled 'Book 00', 'Book 01', ... through the API."""

    def _make(n: int, authors: str = "Author") -> list[dict[str, str]]:
        created = []
        for i in range(n):
            response = test_client.post(
                "/api/books",
                json={
                    "title": f"Book {i:02d}",
                    "authors": authors,
                    "publication_date": "2001",
                    "publisher": "Pub",
                    "price": "10.00",
                },
            )
            assert response.status_code == 201, response.text
            created.append(response.json())
        return created

    return _make
