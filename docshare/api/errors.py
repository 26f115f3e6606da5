import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docshare.core.errors import DocCollabError, ValidationFailed

logger = logging.getLogger(__name__)


async def doccollab_error_handler(request: Request, exc: DocCollabError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, **exc.to_dict()})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Ошибки pydantic в формате {field, message}"""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})

    failure = ValidationFailed(errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"success": False, **failure.to_dict()})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DocCollabError, doccollab_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
