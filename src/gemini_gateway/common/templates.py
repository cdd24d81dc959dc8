"""Prompt defaults and Gemini content-part helpers."""
from __future__ import annotations
import base64
from typing import Any, Iterable

from gemini_gateway.common.schema import ChatMessage

DEFAULT_PROMPTS = {
    "image": "Describe this image:",
    "document": "Summarize the following document:",
    "audio": "Transcribe the following audio:",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# Gemini only knows "user" and "model"
_ROLE_MAP = {"assistant": "model", "bot": "model"}

def render_prompt(prompt: str | None, kind: str) -> str:
    """
    Return the user's prompt, or the default prompt for this upload kind.

    Args:
        prompt: Prompt text from the form; may be None or blank.
        kind: Upload kind ("image", "document" or "audio").

    Returns:
        Prompt text to send upstream.
    """
    if prompt and prompt.strip():
        return prompt
    return DEFAULT_PROMPTS.get(kind, "")

def text_part(text: str) -> dict[str, Any]:
    return {"text": text}

def inline_part(data: bytes, mime_type: str | None) -> dict[str, Any]:
    """
    Build an inline-data part carrying a base64-encoded attachment.

    Args:
        data: Raw file bytes.
        mime_type: Declared media type of the upload.
    """
    return {
        "inlineData": {
            "mimeType": mime_type or DEFAULT_MIME_TYPE,
            "data": base64.b64encode(data).decode("ascii"),
        }
    }

def user_content(*parts: dict[str, Any]) -> list[dict[str, Any]]:
    """Wrap parts into a single-turn `contents` list."""
    return [{"role": "user", "parts": list(parts)}]

def chat_contents(messages: Iterable[ChatMessage]) -> list[dict[str, Any]]:
    """Convert client chat history into Gemini `contents`."""
    return [
        {"role": _ROLE_MAP.get(m.role, m.role), "parts": [text_part(m.content)]}
        for m in messages
    ]
