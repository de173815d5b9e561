from __future__ import annotations

import asyncio
import logging
import os
import sys

import uvicorn

# Install uvloop for better async performance (Linux/macOS only)
if sys.platform != "win32":
    try:
        import uvloop

        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
    except ImportError:
        pass

from .envs.bridge_env import get_settings


def _setup_prometheus_multiproc_dir() -> None:
    """Start every run with an empty Prometheus multiprocess directory."""
    prom_dir = os.environ.get("PROMETHEUS_MULTIPROC_DIR")
    if not prom_dir:
        return

    os.makedirs(prom_dir, exist_ok=True)
    for filename in os.listdir(prom_dir):
        file_path = os.path.join(prom_dir, filename)
        if os.path.isfile(file_path):
            os.remove(file_path)


def main() -> None:
    """Main entry point for the bridge service."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Starting {settings.app_name} Bridge v{settings.app_version}")
    print(f"Bridge address: {settings.bridge_address}")
    print(f"Database: {settings.database_url}")
    print(
        f"Bridge API will be available at: http://{settings.api_host}:{settings.api_port}"
    )
    print(f"Docs: http://{settings.api_host}:{settings.api_port}/docs")

    _setup_prometheus_multiproc_dir()

    # One worker: the unit-of-work lock only orders calls inside one process.
    uvicorn.run(
        "tokenbridge.api.bridge_api.app:create_bridge_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
        workers=1,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
