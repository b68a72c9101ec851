"""
Maps domain errors raised by the services to HTTP responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lodging.core.exceptions import DomainError
from lodging.core.logging import get_logger

logger = get_logger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "domain_error",
        kind=exc.kind,
        status_code=exc.status_code,
        detail=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
