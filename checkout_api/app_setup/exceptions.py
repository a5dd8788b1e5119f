"""
Gestionnaires d'exceptions (utilisés par la factory).
Toute erreur est rendue en JSON {"error": "<message>"} avec le statut d'origine;
aucun message brut de Stripe ni secret n'est renvoyé au client.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from checkout_api.payments.errors import SERVER_ERROR_MESSAGE

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers:
    - HTTPException (dont erreurs métier et 405 du routeur, avec en-tête Allow)
    - RequestValidationError -> 400
    - Exception non gérée -> 500 générique, trace complète dans les logs
    """
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Erreur non gérée sur %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": SERVER_ERROR_MESSAGE})
