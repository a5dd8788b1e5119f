import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from checkout_api.config import Settings, get_settings
from checkout_api.utils.rate_limit import optional_rate_limit
from . import service as payments_service
from .models import CheckoutSessionCreated, ErrorResponse, SessionSummary
from .stripe_client import StripeCheckoutClient, get_checkout_client

router = APIRouter(tags=["Payments API"])

CHECKOUT_PATH = "/create-checkout-session"
ORDER_DETAILS_PATH = "/order-details"

_ERRORS = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _checkout_rate_limit():
    # Limites lues dans les réglages à chaque requête (app construite par la factory)
    async def _dep(request: Request, response: Response):
        settings: Settings = request.app.state.settings
        limiter = optional_rate_limit(settings.checkout_rate_limit, settings.checkout_rate_window)
        return await limiter(request, response)
    return _dep


async def _read_json(request: Request) -> Any:
    # Body absent ou JSON invalide -> {} (rejeté ensuite comme "No items provided")
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


# module checkout_api.payments.views
@router.api_route(
    CHECKOUT_PATH,
    methods=["POST", "OPTIONS"],
    response_model=CheckoutSessionCreated,
    responses={**_ERRORS, 429: {"model": ErrorResponse}},
    dependencies=[Depends(_checkout_rate_limit())],
)
async def create_checkout_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: StripeCheckoutClient = Depends(get_checkout_client),
):
    """
    Crée une session Stripe Checkout pour le panier envoyé par le front.
    - Entrée JSON: { "items": [ { "name", "price", "qty", "image" }, ... ] }
    - OPTIONS: préflight CORS, 200 sans contenu (en-têtes posés par le middleware CORS)
    - Réponse: { "id", "url" }
    - Erreurs: 400 panier vide / sans article achetable, 429 rate limit, 500 erreur Stripe
    """
    if request.method == "OPTIONS":
        return Response(status_code=200)

    payload = await _read_json(request)
    return await run_in_threadpool(
        payments_service.create_checkout_session,
        payload,
        settings=settings,
        client=client,
    )


@router.get(ORDER_DETAILS_PATH, response_model=SessionSummary, responses={**_ERRORS, 404: {"model": ErrorResponse}})
async def order_details(
    session_id: Optional[str] = None,
    client: StripeCheckoutClient = Depends(get_checkout_client),
):
    """
    Résumé d'une session après paiement (page de succès).
    - Paramètre: session_id (substitué par Stripe dans success_url)
    - Montants en centimes, non convertis
    - Erreurs: 400 session_id manquant, 404 session inconnue, 500 erreur Stripe
    """
    summary = await run_in_threadpool(payments_service.get_order_details, session_id, client=client)
    return summary
