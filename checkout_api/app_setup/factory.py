"""
Factory d'application recommandée pour les entrypoints (ex: checkout_api.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional

from fastapi import FastAPI

from checkout_api.config import Settings, load_settings
from checkout_api.payments.stripe_client import StripeCheckoutClient
from .exceptions import register_exception_handlers
from .lifespan import lifespan
from .middlewares import register_cors_middleware, register_no_cache_middleware, register_security_middleware
from .routers import register_routers

def create_app(
    settings: Optional[Settings] = None,
    checkout_client: Optional[StripeCheckoutClient] = None,
) -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - réglages et client Stripe sur app.state (injectés dans les vues par dépendances)
      - middlewares no-cache, sécurité puis CORS (ajouté en dernier pour s'exécuter en premier)
      - gestionnaires d'exceptions et routers
    Paramètres:
      - settings: réglages explicites (sinon lus depuis l'environnement / .env)
      - checkout_client: client Stripe (ou double de test); construit depuis settings si absent
    """
    settings = settings or load_settings()
    app = FastAPI(title="Checkout API", lifespan=lifespan)
    app.state.settings = settings
    app.state.checkout_client = checkout_client or StripeCheckoutClient.from_settings(settings)
    register_no_cache_middleware(app)
    register_security_middleware(app)
    register_cors_middleware(app, settings)
    register_exception_handlers(app)
    register_routers(app)
    return app
