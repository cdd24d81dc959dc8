"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass

from pydantic import BaseModel

class ChatMessage(BaseModel):
    """One conversation turn as sent by the browser client."""
    role: str
    content: str

class ResultOut(BaseModel):
    result: str

class ErrorOut(BaseModel):
    error: str

@dataclass(frozen=True)
class Extraction:
    """Outcome of pulling text out of an upstream response.

    `shape` names the envelope that matched; it is None when `fallback` is set
    and `text` holds the serialized response instead.
    """
    text: str
    shape: str | None = None
    fallback: bool = False
