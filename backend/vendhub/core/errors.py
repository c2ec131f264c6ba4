import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vendhub.core.exceptions import AlreadyImportedError, BackendError, CatalogError

logger = logging.getLogger(__name__)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render a catalog error as {"detail", "code", "details"} with its HTTP status."""
    if isinstance(exc, BackendError):
        logger.error("Backend error on %s %s: %s", request.method, request.url.path, exc.message)
        detail = exc.friendly_message()
    elif isinstance(exc, AlreadyImportedError):
        detail = exc.friendly_message()
    else:
        detail = exc.message
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail, "code": exc.code, "details": exc.details},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
