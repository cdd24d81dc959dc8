from __future__ import annotations

import json
import logging
import sys
from types import SimpleNamespace

import pytest

from gemini_gateway.common.extract import extract, extract_result, resolve


def test_wrapped_parts_shape() -> None:
    resp = {"response": {"candidates": [{"content": {"parts": [{"text": "wrapped"}]}}]}}
    out = extract_result(resp)
    assert out.text == "wrapped"
    assert out.shape == "wrapped"
    assert not out.fallback


def test_direct_shape() -> None:
    resp = {"candidates": [{"content": {"parts": [{"text": "direct"}]}}]}
    assert extract(resp) == "direct"
    assert extract_result(resp).shape == "direct"


def test_wrapped_content_text_shape() -> None:
    resp = {"response": {"candidates": [{"content": {"text": "plain"}}]}}
    out = extract_result(resp)
    assert out.text == "plain"
    assert out.shape == "wrapped-content"


def test_first_matching_shape_wins() -> None:
    resp = {
        "response": {"candidates": [{"content": {"parts": [{"text": "first"}], "text": "third"}}]},
        "candidates": [{"content": {"parts": [{"text": "second"}]}}],
    }
    assert extract(resp) == "first"


def test_empty_wrapped_text_falls_through_to_direct() -> None:
    resp = {
        "response": {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
        "candidates": [{"content": {"parts": [{"text": "second"}]}}],
    }
    assert extract(resp) == "second"


def test_escaped_paragraph_breaks_and_whitespace_are_cleaned() -> None:
    resp = {"candidates": [{"content": {"parts": [{"text": "  ## Title\\n\\nBody text \n"}]}}]}
    assert extract(resp) == "## Title\n\nBody text"


def test_attribute_style_response() -> None:
    part = SimpleNamespace(text="from sdk")
    resp = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
    assert extract(resp) == "from sdk"


@pytest.mark.parametrize(
    "resp",
    [
        None,
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
        {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
        {"candidates": "nope"},
        [1, 2, 3],
        "just a string",
    ],
)
def test_fallback_returns_serialized_input(resp) -> None:  # noqa: ANN001
    out = extract_result(resp)
    assert out.fallback
    assert out.shape is None
    assert out.text
    assert json.loads(out.text) == resp


def test_fallback_is_stable_across_calls() -> None:
    resp = {"promptFeedback": {"blockReason": "SAFETY"}, "candidates": []}
    assert extract(resp) == extract(resp)


def test_fallback_handles_unserializable_values() -> None:
    resp = {"candidates": [], "when": object()}
    out = extract(resp)
    assert '"candidates": []' in out


def test_fallback_handles_circular_references() -> None:
    resp: dict = {"candidates": []}
    resp["self"] = resp
    assert extract(resp)


def test_fallback_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="gemini_gateway.extract"):
        extract({})
    assert "No text found in response" in caplog.text


def test_match_is_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="gemini_gateway.extract"):
        extract({"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})
    assert caplog.records == []


def test_resolve_missing_index() -> None:
    assert resolve({"a": [1]}, ("a", 3)) is None
    assert resolve({"a": [1]}, ("a", 0)) == 1


def test_fallback_handles_very_deep_nesting() -> None:
    nested: list = []
    for _ in range(sys.getrecursionlimit() + 100):
        nested = [nested]
    out = extract_result({"candidates": nested})
    assert out.fallback
    assert out.text


class _BadStr:
    def __str__(self) -> str:
        raise RuntimeError("broken __str__")


def test_fallback_survives_raising_str() -> None:
    out = extract({"candidates": [], "value": _BadStr()})
    assert "candidates" in out
