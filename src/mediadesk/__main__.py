"""Run the mediadesk API server.

Usage:
    python -m mediadesk
"""

from __future__ import annotations

import logging

import uvicorn

from mediadesk.api.app import create_app
from mediadesk.core.config import Settings


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
