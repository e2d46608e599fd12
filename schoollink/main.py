# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ASGI entry point.

Run with ``uvicorn schoollink.main:app`` or the ``schoollink`` console script.
"""

import uvicorn

from schoollink.api.app import create_app
from schoollink.core.config import get_settings

app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the API settings."""
    settings = get_settings()
    uvicorn.run(
        "schoollink.main:app",
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.api.reload else settings.api.workers,
        reload=settings.api.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
