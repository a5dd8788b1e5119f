"""
Adaptateur Stripe: centralise les appels et la configuration du SDK.
Un seul client est construit au démarrage (factory) puis injecté dans les vues
via get_checkout_client; aucun état global (stripe.api_key) n'est modifié.
"""
import logging
from typing import Any, Dict, List

import stripe
from fastapi import Request

from checkout_api.config import Settings
from .errors import ProviderError, SessionNotFound

logger = logging.getLogger(__name__)

# module checkout_api.payments.stripe_client
SESSION_EXPAND = ["payment_intent"]
LINE_ITEMS_PAGE_SIZE = 100


def _is_not_found(err: stripe.InvalidRequestError) -> bool:
    return getattr(err, "http_status", None) == 404 or getattr(err, "code", None) == "resource_missing"


class StripeCheckoutClient:
    """
    Façade minimale sur stripe.StripeClient pour Checkout.
    - create_session: crée une session hébergée
    - retrieve_session: lit une session (payment_intent étendu)
    - list_line_items: lit les lignes d'une session (une page de 100)
    Toute erreur du SDK est journalisée puis convertie en ProviderError / SessionNotFound.
    """

    def __init__(self, client: stripe.StripeClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeCheckoutClient":
        # Pas de retry réseau; le timeout HTTP borne chaque appel
        client = stripe.StripeClient(
            settings.provider_secret_key.get_secret_value(),
            stripe_version=settings.stripe_api_version,
            max_network_retries=0,
            http_client=stripe.RequestsClient(timeout=settings.provider_timeout),
        )
        return cls(client)

    def create_session(self, params: Dict[str, Any]) -> Any:
        """
        Crée une session Stripe Checkout.
        Retour: objet session (id, url, ...).
        """
        try:
            return self._client.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            logger.exception("payments.stripe_client.create_session failed: %s", e)
            raise ProviderError() from e

    def retrieve_session(self, session_id: str) -> Any:
        try:
            return self._client.checkout.sessions.retrieve(
                session_id, params={"expand": SESSION_EXPAND}
            )
        except stripe.InvalidRequestError as e:
            if _is_not_found(e):
                logger.warning("payments.stripe_client.retrieve_session not found session_id=%s", session_id)
                raise SessionNotFound() from e
            logger.exception("payments.stripe_client.retrieve_session failed session_id=%s", session_id)
            raise ProviderError() from e
        except stripe.StripeError as e:
            logger.exception("payments.stripe_client.retrieve_session failed session_id=%s", session_id)
            raise ProviderError() from e

    def list_line_items(self, session_id: str) -> List[Any]:
        try:
            page = self._client.checkout.sessions.line_items.list(
                session_id, params={"limit": LINE_ITEMS_PAGE_SIZE}
            )
        except stripe.StripeError as e:
            logger.exception("payments.stripe_client.list_line_items failed session_id=%s", session_id)
            raise ProviderError() from e
        return list(getattr(page, "data", None) or [])


def get_checkout_client(request: Request) -> StripeCheckoutClient:
    """Dépendance FastAPI: client Stripe attaché à l'application par la factory."""
    return request.app.state.checkout_client
