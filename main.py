"""
Main entrypoint: restore (or create) the registry and serve the FastAPI app.

Env: TURBOAUTH_ADMIN_ADDRESS (required on first start), TURBOAUTH_DB_URL or
TURBOAUTH_DB_PATH, TURBOAUTH_PERSIST, API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT.

API-only without this script:
    uvicorn backend_turboauth.api_server.server:build_app --factory --host 0.0.0.0 --port 8000
"""

import os
import sys

# Configure structured JSON logging before other imports that may log
from backend_turboauth.logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Build the app from settings, then run uvicorn in the main thread."""
    from backend_turboauth.api_server.server import build_app
    from backend_turboauth.config import get_settings
    from backend_turboauth.core.exceptions import InvalidAddressError

    settings = get_settings()
    try:
        app = build_app()
    except InvalidAddressError as e:
        logger.error(
            "main_config_error",
            message="TURBOAUTH_ADMIN_ADDRESS must be 60 uppercase letters (A-Z)",
            error=e.code,
        )
        sys.exit(1)

    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
