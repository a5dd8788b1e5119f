"""
Middlewares transverses de l'application.
- register_cors_middleware: en-têtes CORS restreints à l'origine configurée sur les endpoints checkout.
- register_security_middleware: en-têtes de sécurité sur toutes les réponses.
- register_no_cache_middleware: empêche la mise en cache du résumé de commande (contient un email).
Notes:
- Les en-têtes sont posés aussi sur les réponses d'erreur (400/405/500) produites par les handlers.
- Le préflight OPTIONS répond 200 avec un corps vide, même sans en-tête Origin.
"""
from fastapi import FastAPI, Request

from checkout_api.config import Settings
from checkout_api.payments.views import CHECKOUT_PATH, ORDER_DETAILS_PATH

CORS_METHODS = {
    CHECKOUT_PATH: "POST, OPTIONS",
    ORDER_DETAILS_PATH: "GET",
}
NO_CACHE_PATHS = {ORDER_DETAILS_PATH}


def register_cors_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Pose Access-Control-Allow-* sur les chemins checkout.
    - Origine unique (jamais "*"), méthodes par chemin, en-tête Content-Type autorisé.
    """
    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        response = await call_next(request)
        methods = CORS_METHODS.get(request.url.path)
        if methods:
            response.headers["Access-Control-Allow-Origin"] = settings.allowed_origin
            response.headers["Access-Control-Allow-Methods"] = methods
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Vary"] = "Origin"
        return response


def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response


def register_no_cache_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def no_cache_for_order_details(request: Request, call_next):
        response = await call_next(request)
        if request.url.path in NO_CACHE_PATHS:
            response.headers["Cache-Control"] = "no-store"
            response.headers["Pragma"] = "no-cache"
        return response
