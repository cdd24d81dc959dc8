"""Shared test fixtures."""
from __future__ import annotations

from typing import Any, Callable

import pytest

from gemini_gateway.common.config import get_settings
from gemini_gateway.serve import upstream


class _FakeResponse:
    def __init__(self, json_data: dict[str, Any], status_code: int = 200) -> None:
        self._json = json_data
        self.status_code = status_code

    def json(self) -> dict[str, Any]:
        return self._json


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch):
    """Give every test a fresh settings object with a dummy credential."""
    monkeypatch.setenv("API_KEY", "test-key")
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_gemini(monkeypatch: pytest.MonkeyPatch) -> Callable[..., list[dict[str, Any]]]:
    """Replace httpx.AsyncClient in the upstream module.

    Call the fixture with either a JSON body to return or an exception to
    raise; it returns the list that records each outgoing request.
    """

    def install(
        body: dict[str, Any] | None = None,
        status_code: int = 200,
        error: Exception | None = None,
    ) -> list[dict[str, Any]]:
        calls: list[dict[str, Any]] = []

        class _FakeAsyncClient:
            def __init__(self, timeout: float | None = None) -> None:  # signature-compatible
                self.timeout = timeout

            async def __aenter__(self) -> "_FakeAsyncClient":
                return self

            async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
                return None

            async def post(self, url: str, headers: dict[str, str] | None = None, json: dict[str, Any] | None = None) -> _FakeResponse:  # noqa: A002
                calls.append({"url": url, "headers": headers, "json": json})
                if error is not None:
                    raise error
                return _FakeResponse(body or {}, status_code)

        monkeypatch.setattr(upstream.httpx, "AsyncClient", _FakeAsyncClient)
        return calls

    return install
