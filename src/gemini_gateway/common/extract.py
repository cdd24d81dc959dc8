"""Pull plain text out of Gemini responses of varying shape.

Gemini results reach us in a few envelopes depending on how the call was
made: the bare REST body, a body wrapped under a `response` key, and a
wrapped body whose content carries `text` directly instead of `parts`.
Each is described as a path and tried in order; the first non-empty string
wins. When nothing matches, the whole response is serialized so the caller
still gets something to show.
"""
from __future__ import annotations
import json
import logging
import reprlib
from typing import Any, Sequence

from gemini_gateway.common.schema import Extraction

LOGGER = logging.getLogger("gemini_gateway.extract")

KeyPath = Sequence[str | int]

SHAPES: list[tuple[str, KeyPath]] = [
    ("wrapped", ("response", "candidates", 0, "content", "parts", 0, "text")),
    ("direct", ("candidates", 0, "content", "parts", 0, "text")),
    ("wrapped-content", ("response", "candidates", 0, "content", "text")),
]

_MISSING = object()

def _step(node: Any, key: str | int) -> Any:
    if node is None:
        return _MISSING
    if isinstance(key, int):
        if isinstance(node, (list, tuple)) and -len(node) <= key < len(node):
            return node[key]
        return _MISSING
    if isinstance(node, dict):
        return node.get(key, _MISSING)
    # SDK response objects expose the same fields as attributes
    try:
        return getattr(node, key)
    except Exception:
        return _MISSING

def resolve(response: Any, path: KeyPath) -> Any:
    """Follow `path` through nested mappings, sequences and attributes.

    Returns None as soon as a step is missing.
    """
    node = response
    for key in path:
        node = _step(node, key)
        if node is _MISSING:
            return None
    return node

def clean_text(text: str) -> str:
    """Turn literal "\\n\\n" escapes into paragraph breaks and trim."""
    return text.replace("\\n\\n", "\n\n").strip()

def serialize(response: Any) -> str:
    """Render a response as indented JSON for diagnostics."""
    try:
        return json.dumps(response, indent=2, default=str, ensure_ascii=False)
    except Exception:
        # circular or too deeply nested, or a __str__ that raises
        pass
    try:
        return reprlib.repr(response)
    except Exception:
        return f"<{type(response).__name__}>"

def extract_result(response: Any) -> Extraction:
    """
    Extract text from an upstream response, reporting which envelope matched.

    Args:
        response: Anything returned by the upstream call, including None.

    Returns:
        Extraction with the cleaned text, or the serialized response and
        `fallback=True` when no known envelope holds a non-empty string.
    """
    for name, path in SHAPES:
        text = resolve(response, path)
        if isinstance(text, str) and text:
            return Extraction(text=clean_text(text), shape=name)

    LOGGER.error("No text found in response")
    return Extraction(text=serialize(response), fallback=True)

def extract(response: Any) -> str:
    """Return the response text, or a serialized copy of the response."""
    return extract_result(response).text
