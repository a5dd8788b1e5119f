"""
Registre central des routers (API checkout, health).
"""
from fastapi import FastAPI
from checkout_api.payments import views as payments_views
from checkout_api.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - Les chemins checkout restent à la racine (/create-checkout-session, /order-details)
      pour rester compatibles avec le front existant.
    """
    app.include_router(payments_views.router)
    app.include_router(health_router)
