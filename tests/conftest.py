# tests/conftest.py

from __future__ import annotations

from dataclasses import dataclass

import httpx
import pytest

from board.backends import Identity, MockBackend, SupabaseBackend, get_backend

from .fakes import FakeSupabase

SUPABASE_URL = "https://example.supabase.co"
SUPABASE_KEY = "anon-key"
LIVE_TOKEN = "token-taro"


@dataclass
class BackendCase:
    """A backend plus the identity the scenario runs as."""

    name: str
    backend: object
    identity: Identity
    fake: FakeSupabase | None = None

    @property
    def tasks(self):
        return self.backend.tasks(self.identity)

    @property
    def staff(self):
        return self.backend.staff(self.identity)


@pytest.fixture(autouse=True)
def _fresh_backend():
    """Backends are cached per process; every test starts from settings again."""
    get_backend.cache_clear()
    yield
    get_backend.cache_clear()


@pytest.fixture()
def fake_supabase() -> FakeSupabase:
    fake = FakeSupabase()
    fake.add_user(LIVE_TOKEN, "user-taro", "taro@example.com", display_name="Taro")
    return fake


@pytest.fixture()
def supabase_backend(fake_supabase: FakeSupabase) -> SupabaseBackend:
    return SupabaseBackend(SUPABASE_URL, SUPABASE_KEY, transport=httpx.MockTransport(fake_supabase.handle))


@pytest.fixture(params=["mock", "supabase"])
def case(request) -> BackendCase:
    """
    The same scenario runs against both backends.

    Mock mode uses the real local tables (through pytest-django's ``db``);
    live mode talks to an in-memory PostgREST fake over ``httpx``.
    """
    if request.param == "mock":
        request.getfixturevalue("db")
        backend = MockBackend()
        return BackendCase("mock", backend, backend.resolve_identity(None))

    fake = request.getfixturevalue("fake_supabase")
    backend = request.getfixturevalue("supabase_backend")
    return BackendCase("supabase", backend, backend.resolve_identity(LIVE_TOKEN), fake)


@pytest.fixture()
def mock_mode(settings, db):
    settings.TASK_BACKEND = "mock"
    return settings


@pytest.fixture()
def live_mode(settings, supabase_backend, monkeypatch):
    """Route the API through the fake Supabase project."""
    settings.TASK_BACKEND = "supabase"
    monkeypatch.setattr("board.views.get_backend", lambda: supabase_backend)
    return supabase_backend


@pytest.fixture(params=["mock", "supabase"])
def api_auth(request) -> dict:
    """Run an API test once per backend; returns the client headers to send."""
    if request.param == "mock":
        request.getfixturevalue("mock_mode")
        return {}
    request.getfixturevalue("live_mode")
    return {"HTTP_AUTHORIZATION": f"Bearer {LIVE_TOKEN}"}
