"""
Shared fixtures: every test gets a fresh in-memory database.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["TOKENIZER_ENCODING"] = ""

import pytest
from fastapi.testclient import TestClient

from chatkeep.database import Base, engine, init_db, sessionlocal
from chatkeep.main import app


@pytest.fixture
def client():
    init_db()
    Base.metadata.drop_all(bind=engine)
    # Startup re-creates the tables and seeds the default user
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    session = sessionlocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_conversation(client):
    def _make(title="Test Conversation", **extra):
        response = client.post("/api/conversations", json={"title": title, **extra})
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def add_message(client):
    def _add(conversation_id, content="Hello there", role="user", **extra):
        response = client.post(
            f"/api/conversations/{conversation_id}/messages",
            json={"content": content, "role": role, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _add
