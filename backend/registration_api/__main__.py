"""Run the registration API with uvicorn."""

from __future__ import annotations

import argparse

import uvicorn

from registration_api.core.settings import settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the player registration API")
    parser.add_argument("--host", default=settings.HOST, help="Host interface to bind")
    parser.add_argument("--port", type=int, default=settings.PORT, help="TCP port to listen on")
    parser.add_argument("--reload", action="store_true", help="Enable autoreload (dev mode)")
    args = parser.parse_args()

    uvicorn.run(
        "registration_api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
