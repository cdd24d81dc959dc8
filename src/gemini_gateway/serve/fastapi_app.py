"""FastAPI gateway in front of Gemini's generateContent API.

Endpoints:
- GET  /health
- POST /api/chat                 { "messages": [{"role": "...", "content": "..."}] }
- POST /generate-text            { "prompt": "..." }
- POST /generate-from-image      multipart: image + optional prompt
- POST /generate-from-document   multipart: document + optional prompt
- POST /generate-from-audio      multipart: audio + optional prompt

Every POST answers { "result": "..." } or { "error": "..." }. The browser
client in `public/` is served at /.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_gateway.common.config import get_settings
from gemini_gateway.common.extract import extract
from gemini_gateway.common.logging_setup import setup_logging
from gemini_gateway.common.schema import ChatMessage, ResultOut
from gemini_gateway.common.templates import (
    chat_contents,
    inline_part,
    render_prompt,
    text_part,
    user_content,
)
from gemini_gateway.serve import upstream

LOGGER = logging.getLogger("gemini_gateway.app")
setup_logging(get_settings().log_level)

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"

app = FastAPI(title="Gemini Gateway")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def _error_envelope(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

def _describe_validation_error(err: dict[str, Any]) -> str:
    # loc starts with "body"; the field name follows
    field = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
    return f"{field}: {err.get('msg', 'invalid value')}"

@app.exception_handler(RequestValidationError)
async def _invalid_form(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed multipart fields are processing failures, like a missing upload."""
    message = "; ".join(_describe_validation_error(err) for err in exc.errors()) or "Invalid request"
    LOGGER.error("Rejected %s: %s", request.url.path, message)
    return JSONResponse(status_code=500, content={"error": message})

@app.on_event("startup")
def _check_credentials_on_startup() -> None:
    """Warn early when the upstream credential is missing."""
    settings = get_settings()
    if not settings.api_key:
        LOGGER.warning("API_KEY is not set; every generation request will fail")
    LOGGER.info("Gemini gateway ready (model=%s)", settings.model)

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "model": get_settings().model}

async def _json_body(request: Request) -> dict[str, Any]:
    """Decode a JSON object body; an empty body counts as {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body is not valid JSON")
    return body if isinstance(body, dict) else {}


@app.post("/api/chat", response_model=ResultOut)
async def chat(request: Request) -> ResultOut:
    body = await _json_body(request)
    settings = get_settings()
    try:
        messages = body.get("messages")
        if not isinstance(messages, list):
            raise ValueError("messages must be an array")
        history = [ChatMessage.model_validate(m) for m in messages]
        data = await upstream.generate_content(
            settings, settings.model_for("chat"), chat_contents(history)
        )
    except Exception as e:
        LOGGER.error("Chat request failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return ResultOut(result=extract(data))


@app.post("/generate-text", response_model=ResultOut)
async def generate_text(request: Request) -> ResultOut:
    body = await _json_body(request)
    prompt = body.get("prompt")
    if not prompt or not isinstance(prompt, str):
        raise HTTPException(status_code=400, detail="Prompt is missing or invalid format.")

    settings = get_settings()
    try:
        data = await upstream.generate_content(settings, settings.model_for("text"), prompt)
    except Exception as e:
        LOGGER.error("Text generation failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return ResultOut(result=extract(data))


async def _generate_from_upload(kind: str, upload: UploadFile | None, prompt: str | None) -> ResultOut:
    """Send one uploaded file plus a prompt upstream.

    The upload is read fully into memory and always closed before returning.
    """
    settings = get_settings()
    try:
        if upload is None:
            raise ValueError(f"No {kind} file was uploaded")
        raw = await upload.read()
        contents = user_content(
            text_part(render_prompt(prompt, kind)),
            inline_part(raw, upload.content_type),
        )
        del raw
        data = await upstream.generate_content(settings, settings.model_for(kind), contents)
    except Exception as e:
        LOGGER.error("Generation from %s failed: %s", kind, e)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        if upload is not None:
            await upload.close()
    return ResultOut(result=extract(data))


@app.post("/generate-from-image", response_model=ResultOut)
async def generate_from_image(
    image: UploadFile | None = File(None),
    prompt: str | None = Form(None),
) -> ResultOut:
    return await _generate_from_upload("image", image, prompt)


@app.post("/generate-from-document", response_model=ResultOut)
async def generate_from_document(
    document: UploadFile | None = File(None),
    prompt: str | None = Form(None),
) -> ResultOut:
    return await _generate_from_upload("document", document, prompt)


@app.post("/generate-from-audio", response_model=ResultOut)
async def generate_from_audio(
    audio: UploadFile | None = File(None),
    prompt: str | None = Form(None),
) -> ResultOut:
    return await _generate_from_upload("audio", audio, prompt)


# Registered last so the API routes above take precedence.
app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")
