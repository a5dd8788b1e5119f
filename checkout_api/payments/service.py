"""
Cas d'usage 'payments': orchestre cart, stripe_client et summary.
Fonctions synchrones: les vues les exécutent dans le threadpool.
"""
import logging
from typing import Any, Dict

from checkout_api.config import Settings
from . import cart
from .errors import CheckoutError, MissingSessionId, ProviderError, ServerError
from .models import CheckoutSessionCreated, SessionSummary
from .stripe_client import StripeCheckoutClient
from .summary import summarize_session

logger = logging.getLogger(__name__)


def build_session_params(payload: Any, settings: Settings) -> Dict[str, Any]:
    """
    Prépare les paramètres de stripe checkout.sessions.create à partir du body client.
    Les URLs de redirection viennent uniquement de la configuration serveur.
    """
    items = cart.normalize_cart(payload, settings)
    params: Dict[str, Any] = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": cart.to_line_items(items, settings.currency),
        "success_url": settings.success_url,
        "cancel_url": settings.cancel_url,
        "allow_promotion_codes": settings.allow_promotion_codes,
        "billing_address_collection": settings.billing_address_collection,
        "phone_number_collection": {"enabled": settings.collect_phone_number},
        "metadata": cart.make_metadata(settings),
    }
    if settings.automatic_tax:
        params["automatic_tax"] = {"enabled": True}
    return params


def create_checkout_session(
    payload: Any,
    *,
    settings: Settings,
    client: StripeCheckoutClient,
) -> CheckoutSessionCreated:
    """
    Valide le panier puis crée la session Stripe.
    - Erreurs de validation (400) levées avant tout appel Stripe.
    - Échec Stripe ou inattendu: journalisé, renvoyé comme erreur serveur générique.
    """
    params = build_session_params(payload, settings)
    try:
        session = client.create_session(params)
    except CheckoutError:
        raise
    except Exception as e:
        logger.exception("payments.service.create_checkout_session failed")
        raise ServerError() from e

    session_id = getattr(session, "id", None)
    url = getattr(session, "url", None)
    if not session_id or not url:
        logger.error("payments.service.create_checkout_session invalid session id=%s url=%s", session_id, url)
        raise ProviderError()
    logger.info("payments.checkout created id=%s items=%s", session_id, len(params["line_items"]))
    return CheckoutSessionCreated(id=session_id, url=url)


def get_order_details(session_id: str | None, *, client: StripeCheckoutClient) -> SessionSummary:
    """
    Récupère la session et ses lignes puis renvoie le résumé client.
    - MissingSessionId si session_id absent (aucun appel Stripe).
    """
    session_id = (session_id or "").strip()
    if not session_id:
        raise MissingSessionId()
    try:
        session = client.retrieve_session(session_id)
        line_items = client.list_line_items(session_id)
        return summarize_session(session, line_items)
    except CheckoutError:
        raise
    except Exception as e:
        logger.exception("payments.service.get_order_details failed session_id=%s", session_id)
        raise ServerError() from e
