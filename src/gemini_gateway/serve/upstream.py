"""Single-shot calls to Gemini's `generateContent` REST endpoint."""
from __future__ import annotations
import logging
import time
from typing import Any

import httpx

from gemini_gateway.common.config import Settings

LOGGER = logging.getLogger("gemini_gateway.upstream")

class UpstreamError(RuntimeError):
    """Gemini answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code

def _error_message(r: httpx.Response) -> str:
    """Prefer Gemini's own error text over the bare status line."""
    try:
        message = r.json()["error"]["message"]
        if isinstance(message, str) and message:
            return message
    except Exception:
        pass
    return f"Upstream returned HTTP {r.status_code}"

async def generate_content(
    settings: Settings, model: str, contents: list[dict[str, Any]] | str
) -> dict[str, Any]:
    """
    Call Gemini once and return the decoded JSON body.

    Args:
        settings: Gateway settings (credential, base URL, timeout).
        model: Model id, e.g. "gemini-2.5-flash".
        contents: Gemini `contents` list, or a bare prompt string.

    Raises:
        UpstreamError: Gemini rejected the request.
        httpx.HTTPError: Network failure or timeout.
    """
    if not settings.api_key:
        raise UpstreamError(500, "API_KEY is not configured")
    if isinstance(contents, str):
        contents = [{"role": "user", "parts": [{"text": contents}]}]

    url = f"{settings.base_url}/models/{model}:generateContent"
    headers = {"x-goog-api-key": settings.api_key}
    payload = {"contents": contents}

    start = time.time()
    async with httpx.AsyncClient(timeout=settings.timeout) as client:
        r = await client.post(url, headers=headers, json=payload)
        if r.status_code >= 400:
            raise UpstreamError(r.status_code, _error_message(r))
        data = r.json()
    LOGGER.info("Gemini %s answered in %sms", model, int((time.time() - start) * 1000))
    return data
