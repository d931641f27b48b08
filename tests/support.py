"""Shared fixtures: an app wired to a private in-memory database."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from tierboard.app import create_app
from tierboard.core import get_session

PASSWORD = "secret1"


def memory_engine(enforce_foreign_keys: bool = False):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if enforce_foreign_keys:

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    SQLModel.metadata.create_all(engine)
    return engine


class AdvancingClock:
    """Stands in for ``utcnow``; every call is one second later than the last."""

    def __init__(self):
        self.now = datetime.now(timezone.utc) + timedelta(days=1)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class ApiTestCase(unittest.TestCase):
    enforce_foreign_keys = False

    def setUp(self):
        self.engine = memory_engine(self.enforce_foreign_keys)
        self.app = create_app()

        def _session_override():
            with Session(self.engine) as session:
                yield session

        self.app.dependency_overrides[get_session] = _session_override

    def tearDown(self):
        self.app.dependency_overrides.clear()
        self.engine.dispose()

    def anonymous(self) -> TestClient:
        return TestClient(self.app)

    def register(self, username: str, password: str = PASSWORD) -> TestClient:
        """Return a client logged in as a freshly registered user."""

        client = self.anonymous()
        response = client.post(
            "/auth/register", json={"username": username, "password": password}
        )
        self.assertEqual(response.status_code, 201, response.text)
        return client

    def create_board(self, client: TestClient, name="Anime", tags=None) -> dict:
        response = client.post(
            "/boards", json={"name": name, "initialTags": tags or []}
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def add_character(self, client: TestClient, board_id: str, **fields) -> dict:
        character = {"name": "Goku", "series": "DB", "imageUrl": "x", "tags": []}
        character.update(fields)
        response = client.post(
            f"/boards/{board_id}/characters", json={"character": character}
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()
