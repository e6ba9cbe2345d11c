"""Supabase (PostgREST + GoTrue) client for tasks, staff, and identity lookup."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger("integrations.supabase")


class SupabaseAPIError(Exception):
    """Raised when Supabase returns a non-2xx response."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Supabase API error {status_code}: {detail}")


def make_http_client(url: str, timeout: float = 10, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Build the connection pool shared by every ``SupabaseClient``."""
    return httpx.Client(base_url=url.rstrip("/"), timeout=timeout, transport=transport)


class SupabaseClient:
    """Thin wrapper over the PostgREST table API.

    Row-level security decides what the caller may read or change, so every
    request carries the caller's access token when one is known and falls
    back to the project's anon key otherwise.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: str | None = None,
        timeout: float = 10,
        http: httpx.Client | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self._http = http or make_http_client(self.url, timeout)

    def _headers(self, **extra: str) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            **extra,
        }

    @staticmethod
    def _check(response: httpx.Response, *expected: int) -> None:
        if response.status_code not in expected:
            raise SupabaseAPIError(response.status_code, response.text)

    def select(self, table: str, params: list[tuple[str, str]]) -> list[dict]:
        """Run ``GET /rest/v1/<table>`` with PostgREST filter params."""
        response = self._http.get(
            f"/rest/v1/{table}", params=[("select", "*"), *params], headers=self._headers(),
        )
        self._check(response, 200)
        return response.json()

    def insert(self, table: str, row: dict) -> dict:
        """Insert one row and return it as stored."""
        response = self._http.post(
            f"/rest/v1/{table}",
            json=row,
            headers=self._headers(Prefer="return=representation"),
        )
        self._check(response, 200, 201)
        rows = response.json()
        if not rows:
            raise SupabaseAPIError(response.status_code, f"insert into {table} returned no row")
        return rows[0]

    def update(self, table: str, params: list[tuple[str, str]], fields: dict) -> list[dict]:
        """Patch every row matching ``params`` and return the updated rows."""
        response = self._http.patch(
            f"/rest/v1/{table}",
            params=params,
            json=fields,
            headers=self._headers(Prefer="return=representation"),
        )
        self._check(response, 200)
        return response.json()

    def delete(self, table: str, params: list[tuple[str, str]]) -> None:
        if not params:
            raise ValueError("Refusing to delete without a filter")
        response = self._http.delete(f"/rest/v1/{table}", params=params, headers=self._headers())
        self._check(response, 200, 204)

    def get_user(self) -> dict:
        """Return the auth user behind the current access token.

        Raises:
            SupabaseAPIError: If the token is missing, expired, or rejected.
            httpx.HTTPError: If Supabase is unreachable.
        """
        if not self.access_token:
            raise SupabaseAPIError(401, "No access token")
        response = self._http.get("/auth/v1/user", headers=self._headers())
        self._check(response, 200)
        return response.json()


def eq(column: str, value) -> tuple[str, str]:
    if isinstance(value, bool):
        value = str(value).lower()
    return column, f"eq.{value}"


def in_(column: str, values) -> tuple[str, str]:
    return column, f"in.({','.join(str(v) for v in values)})"


def order(*columns: str) -> tuple[str, str]:
    return "order", ",".join(f"{c}.asc" for c in columns)
