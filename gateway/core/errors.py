import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)

NOT_FOUND_TEXT = "404 The requested path could not be found"

class UpstreamTransportError(Exception):
    """Connection-level failure talking to an upstream HTTP service."""
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason

class WarehouseError(Exception):
    """The listings warehouse rejected or failed a query."""

async def upstream_transport_handler(request: Request, exc: UpstreamTransportError):
    log.error("upstream transport failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"ok": False, "error": str(exc)})

async def warehouse_error_handler(request: Request, exc: WarehouseError):
    log.error("warehouse failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})

async def not_found_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths answer in plain text like a static host would
    if exc.status_code == 404:
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
    return await http_exception_handler(request, exc)

def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UpstreamTransportError, upstream_transport_handler)
    app.add_exception_handler(WarehouseError, warehouse_error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
