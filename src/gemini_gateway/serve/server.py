"""Run the gateway with uvicorn on $HOST:$PORT."""
from __future__ import annotations
import logging

import uvicorn

from gemini_gateway.common.config import get_settings
from gemini_gateway.common.logging_setup import setup_logging

LOGGER = logging.getLogger("gemini_gateway.server")

def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    LOGGER.info("Gemini gateway listening on http://localhost:%s", settings.port)
    uvicorn.run(
        "gemini_gateway.serve.fastapi_app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )

if __name__ == "__main__":
    main()
