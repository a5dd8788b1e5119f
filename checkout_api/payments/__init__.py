"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier, client Stripe, résumé de session et cas d'usage.
"""

from .cart import normalize_cart, normalize_item, to_line_items, to_minor_units, make_metadata
from .errors import (
    CheckoutError,
    NoItems,
    NoPurchasableItems,
    InvalidItem,
    MissingSessionId,
    SessionNotFound,
    TooManyRequests,
    ProviderError,
    ServerError,
)
from .models import NormalizedLineItem, CheckoutSessionCreated, SessionSummary, LineItemSummary
from .stripe_client import StripeCheckoutClient, get_checkout_client
from .summary import summarize_session
from .service import build_session_params, create_checkout_session, get_order_details

__all__ = [
    # cart
    "normalize_cart",
    "normalize_item",
    "to_line_items",
    "to_minor_units",
    "make_metadata",
    # errors
    "CheckoutError",
    "NoItems",
    "NoPurchasableItems",
    "InvalidItem",
    "MissingSessionId",
    "SessionNotFound",
    "TooManyRequests",
    "ProviderError",
    "ServerError",
    # models
    "NormalizedLineItem",
    "CheckoutSessionCreated",
    "SessionSummary",
    "LineItemSummary",
    # stripe
    "StripeCheckoutClient",
    "get_checkout_client",
    # summary
    "summarize_session",
    # services
    "build_session_params",
    "create_checkout_session",
    "get_order_details",
]
