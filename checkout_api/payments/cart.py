"""
Logique panier pure (pas de Stripe, pas de réseau).
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from checkout_api.config import Settings
from .errors import InvalidItem, NoItems, NoPurchasableItems
from .models import NormalizedLineItem

# module checkout_api.payments.cart
_CENT = Decimal("1")


def to_minor_units(price: float) -> int:
    """
    Convertit un prix en unités majeures (ex: dollars) en centimes.
    - Arrondi "half-up" sur la représentation décimale du prix: 19.99 -> 1999, 0.005 -> 1.
    """
    return int((Decimal(str(price)) * 100).quantize(_CENT, rounding=ROUND_HALF_UP))


def _coerce_price(raw: Any) -> float:
    # nan si non convertible: l'appelant décide (drop ou reject)
    try:
        return float(raw or 0)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def _coerce_qty(raw: Any) -> int:
    try:
        qty = float(raw or 1)
    except (TypeError, ValueError, OverflowError):
        return 1
    if not math.isfinite(qty):
        return 1
    return max(1, math.floor(qty))


def extract_items(payload: Any) -> List[Any]:
    """
    Retourne la liste brute payload["items"].
    - Soulève NoItems si le body n'est pas un objet ou si items est absent/vide.
    """
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list) or not items:
        raise NoItems()
    return items


def normalize_item(raw: Any, settings: Settings) -> NormalizedLineItem | None:
    """
    Normalise une ligne brute {name, price, qty, image}.
    - name: texte nettoyé, valeur par défaut si vide, tronqué à max_name_length
    - price: float >= 0; None si non fini (ligne invalide)
    - qty: entier >= 1 (floor + clamp)
    - image: conservée uniquement si c'est une chaîne non vide
    """
    item = raw if isinstance(raw, dict) else {}
    name = str(item.get("name") or "").strip() or settings.default_item_name
    name = name[: settings.max_name_length]

    price = _coerce_price(item.get("price"))
    if not math.isfinite(price):
        return None
    price = max(0.0, price)

    image = item.get("image")
    images = [image] if isinstance(image, str) and image.strip() else []

    return NormalizedLineItem(
        name=name,
        unit_amount=to_minor_units(price),
        quantity=_coerce_qty(item.get("qty")),
        images=images,
    )


def normalize_cart(payload: Any, settings: Settings) -> List[NormalizedLineItem]:
    """
    Valide le payload et renvoie les lignes achetables.
    - Politique on_invalid_item="drop": lignes invalides ignorées.
    - Politique on_invalid_item="reject": InvalidItem(index) à la première ligne invalide.
    - Les lignes à montant nul sont toujours écartées.
    - Soulève NoPurchasableItems si aucune ligne ne subsiste.
    """
    normalized: List[NormalizedLineItem] = []
    for idx, raw in enumerate(extract_items(payload)):
        item = normalize_item(raw, settings)
        if item is None:
            if settings.on_invalid_item == "reject":
                raise InvalidItem(idx)
            continue
        if item.unit_amount <= 0:
            continue
        normalized.append(item)
    if not normalized:
        raise NoPurchasableItems()
    return normalized


def to_line_items(items: List[NormalizedLineItem], currency: str) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data + product_data) à partir des lignes normalisées.
    """
    line_items: List[Dict[str, Any]] = []
    for item in items:
        product_data: Dict[str, Any] = {"name": item.name}
        if item.images:
            product_data["images"] = list(item.images)
        line_items.append({
            "price_data": {
                "currency": currency,
                "product_data": product_data,
                "unit_amount": item.unit_amount,
            },
            "quantity": item.quantity,
        })
    return line_items


def make_metadata(settings: Settings) -> Dict[str, str]:
    """
    Métadonnées attachées à la session pour le rapprochement côté Stripe.
    - site: identifiant du site
    - env: environnement de déploiement (si configuré)
    """
    metadata = {"site": settings.site_name}
    if settings.deployment_env:
        metadata["env"] = settings.deployment_env
    return metadata
