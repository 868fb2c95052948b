import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.exceptions import AttendanceError

logger = logging.getLogger(__name__)


def _now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_body(code: str, message: str) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message},
        "generated_at": _now_iso(),
    }


def _describe(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def add_error_handlers(app: FastAPI):
    # ✅ domain errors: validation / unknown identifier / conflict / not found
    @app.exception_handler(AttendanceError)
    async def attendance_error_handler(request: Request, exc: AttendanceError):
        logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))

    # ✅ malformed bodies / query strings are caller errors, not 422s
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _describe(exc.errors())
        logger.warning("%s %s -> 400 %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content=error_body("VALIDATION_ERROR", message))

    # ✅ anything else: logged with traceback, generic 500
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_body("INTERNAL_ERROR", "Internal server error"))
