"""Startup script for the credgate service."""

import os

import uvicorn


def main() -> None:
    """Start the service with settings from environment variables."""
    host = os.getenv("CREDGATE_HOST", "0.0.0.0")
    port = int(os.getenv("CREDGATE_PORT", "8000"))
    reload = os.getenv("CREDGATE_RELOAD", "false").lower() == "true"

    config = uvicorn.Config(
        "credgate_proxy.main:app",
        host=host,
        port=port,
        reload=reload,
        timeout_graceful_shutdown=int(os.getenv("SHUTDOWN_TIMEOUT_SECONDS", "30")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )

    server = uvicorn.Server(config)
    server.run()


if __name__ == "__main__":
    main()
