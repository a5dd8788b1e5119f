"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `checkout_api.asgi:app`.
- Toute la configuration FastAPI (routes, middlewares, client Stripe) est centralisée
  dans checkout_api.app_setup.factory, ce fichier ne fait qu'exposer l'instance `app`.
"""

from checkout_api.app_setup.factory import create_app

app = create_app()
