"""
Gestionnaires d'exceptions.
- HTTPException: body JSON {"detail": ...} (detail = {kind, message, ...} pour les erreurs métier).
- Exception non gérée: 500 internal_error, message générique, détail journalisé.
"""
import logging
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse

from storefront.errors import INTERNAL_ERROR, INTERNAL_MESSAGE

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def json_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("http.error status=%s path=%s", exc.status_code, request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("http.unhandled path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": {"kind": INTERNAL_ERROR, "message": INTERNAL_MESSAGE}})
