# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers translating domain errors to HTTP responses.

Every SchoolLinkError is rendered as ``{"error": code, "detail": message}``
with the status code carried by the error class.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schoollink.domains.errors import SchoolLinkError

logger = logging.getLogger(__name__)


def error_body(exc: SchoolLinkError) -> dict[str, str]:
    """Build the JSON body for a domain error."""
    return {"error": exc.code, "detail": exc.message}


async def schoollink_error_handler(request: Request, exc: SchoolLinkError) -> JSONResponse:
    """Render a domain error.

    Args:
        request: Request that failed.
        exc: The SchoolLinkError raised by a service.

    Returns:
        JSON response with the error's status code.
    """
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain exception handlers on an application."""
    app.add_exception_handler(SchoolLinkError, schoollink_error_handler)
