"""
Mise en forme d'une session Stripe Checkout pour le client (page de confirmation).
"""
from typing import Any, Iterable, Mapping

from .models import LineItemSummary, SessionSummary

# module checkout_api.payments.summary


def _field(obj: Any, name: str) -> Any:
    # StripeObject, dict ou simple objet -> valeur ou None
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def customer_email(session: Any) -> str | None:
    """
    Email client: customer_details.email, sinon customer_email, sinon None.
    """
    details = _field(session, "customer_details")
    return _field(details, "email") or _field(session, "customer_email") or None


def summarize_line_item(item: Any, session_currency: str | None) -> LineItemSummary:
    """
    Une ligne de la session.
    - unit_amount: price.unit_amount (None si absent), en centimes
    - currency: price.currency, sinon la devise de la session
    """
    price = _field(item, "price")
    return LineItemSummary(
        description=_field(item, "description"),
        quantity=_field(item, "quantity"),
        unit_amount=_field(price, "unit_amount"),
        currency=_field(price, "currency") or session_currency,
    )


def summarize_session(session: Any, line_items: Iterable[Any]) -> SessionSummary:
    """
    Construit le résumé renvoyé par /order-details.
    Les montants restent en unités mineures: la conversion est l'affaire du front.
    """
    currency = _field(session, "currency")
    return SessionSummary(
        id=_field(session, "id"),
        customer_email=customer_email(session),
        currency=currency,
        amount_total=_field(session, "amount_total"),
        payment_status=_field(session, "payment_status"),
        line_items=[summarize_line_item(item, currency) for item in line_items],
    )
