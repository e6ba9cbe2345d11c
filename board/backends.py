"""Backend selection: mock (local database) or live (Supabase), chosen once."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import httpx
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from board.repositories import (
    LocalStaffRepository,
    LocalTaskRepository,
    SupabaseStaffRepository,
    SupabaseTaskRepository,
)
from integrations.supabase import SupabaseAPIError, SupabaseClient, make_http_client

logger = logging.getLogger("board.backends")


class IdentityError(Exception):
    """Raised when the caller cannot be identified."""


@dataclass(frozen=True)
class Identity:
    user_id: str
    display_name: str
    email: str = ""
    access_token: str | None = None


def display_name_for(user: dict) -> str:
    """Pick the name a user appears under on the board."""
    metadata = user.get("user_metadata") or {}
    email = user.get("email") or ""
    return metadata.get("display_name") or email.split("@")[0] or email


class MockBackend:
    """Everything lives in the local database and every caller is the demo user."""

    name = "mock"

    def resolve_identity(self, access_token: str | None) -> Identity:
        return Identity(
            user_id=settings.MOCK_USER_ID,
            display_name=settings.MOCK_USER_NAME,
            email=settings.MOCK_USER_EMAIL,
        )

    def tasks(self, identity: Identity) -> LocalTaskRepository:
        return LocalTaskRepository()

    def staff(self, identity: Identity) -> LocalStaffRepository:
        return LocalStaffRepository()


class SupabaseBackend:
    """Talks to the hosted project with the caller's own access token."""

    name = "supabase"

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not url or not api_key:
            raise ImproperlyConfigured("SUPABASE_URL and SUPABASE_ANON_KEY are required for TASK_BACKEND=supabase")
        self.url = url
        self.api_key = api_key
        self.http = make_http_client(url, timeout=timeout, transport=transport)

    def client(self, access_token: str | None = None) -> SupabaseClient:
        return SupabaseClient(self.url, self.api_key, access_token=access_token, http=self.http)

    def resolve_identity(self, access_token: str | None) -> Identity:
        """Look up the user behind ``access_token``.

        Raises:
            IdentityError: If the token is missing or rejected, or Supabase
                cannot be reached.
        """
        if not access_token:
            raise IdentityError("Missing or invalid Authorization header")
        try:
            user = self.client(access_token).get_user()
        except SupabaseAPIError as e:
            logger.warning("Supabase rejected access token: %s", e)
            raise IdentityError("Invalid or expired access token") from e
        except httpx.HTTPError as e:
            logger.error("Could not reach Supabase auth: %s", e)
            raise IdentityError("Could not reach Supabase") from e
        return Identity(
            user_id=user["id"],
            display_name=display_name_for(user),
            email=user.get("email") or "",
            access_token=access_token,
        )

    def tasks(self, identity: Identity) -> SupabaseTaskRepository:
        return SupabaseTaskRepository(self.client(identity.access_token))

    def staff(self, identity: Identity) -> SupabaseStaffRepository:
        return SupabaseStaffRepository(self.client(identity.access_token))


def build_backend(name: str):
    if name == "mock":
        return MockBackend()
    if name == "supabase":
        return SupabaseBackend(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, timeout=settings.SUPABASE_TIMEOUT)
    raise ImproperlyConfigured(f"Unknown TASK_BACKEND: {name!r}")


@lru_cache(maxsize=1)
def get_backend():
    backend = build_backend(settings.TASK_BACKEND)
    logger.info("Using %s task backend", backend.name)
    return backend
