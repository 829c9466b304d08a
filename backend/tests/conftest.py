"""
Shared fixtures: an in-memory stand-in for the remote store, player
factories and a wired service container for API tests.
"""

import copy
from typing import Any, Dict, Optional

import pytest

from scout_desk.core.config import Settings
from scout_desk.schemas.player import Foot, Player, Position, Recommendation
from scout_desk.services.kv_store import InMemoryKeyValueStore
from scout_desk.services.repository import build_repositories


class FakeStoreClient:
    """Path-addressed dict tree behaving like the Realtime Database REST API."""

    def __init__(self, configured: bool = True) -> None:
        self.configured = configured
        self.data: Dict[str, Any] = {}
        self.fail_writes = False
        self.fail_reads = False
        self.writes = []

    def is_configured(self) -> bool:
        return self.configured

    def fetch(self, path: str):
        if not self.configured or self.fail_reads:
            return False, None
        node: Any = self.data
        for part in path.strip("/").split("/"):
            if not isinstance(node, dict) or part not in node:
                return True, None
            node = node[part]
        return True, copy.deepcopy(node)

    def get(self, path: str) -> Optional[Any]:
        ok, data = self.fetch(path)
        return data if ok else None

    def put(self, path: str, data: Any):
        if self.fail_writes:
            return False, 500, "store unavailable"
        parts = path.strip("/").split("/")
        node = self.data
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = copy.deepcopy(data)
        self.writes.append(path)
        return True, 200, "ok"

    def delete(self, path: str):
        if self.fail_writes:
            return False, 500, "store unavailable"
        parts = path.strip("/").split("/")
        node = self.data
        for part in parts[:-1]:
            if part not in node:
                return True, 200, "null"
            node = node[part]
        node.pop(parts[-1], None)
        return True, 200, "null"


@pytest.fixture
def fake_client() -> FakeStoreClient:
    return FakeStoreClient()


@pytest.fixture
def repos(fake_client):
    return build_repositories(fake_client)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        store_url="https://scout-desk-test.firebaseio.example",
        data_dir=tmp_path,
        ai_api_key=None,
        refresh_interval_seconds=3600,
        auth_secret="test-secret",
    )


@pytest.fixture
def make_player():
    counter = {"n": 0}

    def _make(**overrides) -> Player:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"p{n}",
            "name": f"Player {n}",
            "club": "Porto Vitória",
            "competition": "Capixaba",
            "position1": Position.ATA,
            "foot": Foot.RIGHT,
            "birth_date": "2005-06-15",
            "recommendation": Recommendation.MONITORING,
            "scout_year": 2026,
        }
        fields.update(overrides)
        return Player(**fields)

    return _make


@pytest.fixture
def container(settings, repos):
    from scout_desk.api.deps import Container

    return Container(settings=settings, repos=repos, local=InMemoryKeyValueStore(), squads=InMemoryKeyValueStore())


@pytest.fixture
def api(container):
    from fastapi.testclient import TestClient

    from scout_desk.api.deps import get_container
    from scout_desk.main import app

    app.dependency_overrides[get_container] = lambda: container
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def login(api):
    def _login(username, password="s3cret"):
        response = api.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200
        body = response.json()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]

    return _login


@pytest.fixture
def admin(api, login):
    """First registered account, logged in; the client sends its token by default."""
    payload = {
        "first_name": "Marta",
        "last_name": "Silva",
        "password": "s3cret",
        "password_confirmation": "s3cret",
    }
    assert api.post("/api/v1/auth/register", json=payload).status_code == 200
    headers, user = login("marta.silva")
    api.headers.update(headers)
    return user
