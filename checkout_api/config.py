# checkout_api.config
"""
Configuration centrale du service de checkout.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env) sans écraser l'environnement réel
- Normalise les valeurs (guillemets, backticks, espaces) et applique les défauts
- Construit un objet Settings explicite, créé une seule fois au démarrage
  puis transmis aux handlers via app.state
"""
import os
from pathlib import Path
from typing import Literal, Mapping, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

DEFAULT_SITE_URL = "https://www.squarebidness.com"
DEFAULT_LISTEN_PORT = 4242


class ConfigError(RuntimeError):
    """Configuration absente ou invalide au démarrage."""


def _clean_env(v: Optional[str]) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")


def _first(env: Mapping[str, str], *names: str) -> str:
    # Première variable non vide parmi les alias
    for name in names:
        value = _clean_env(env.get(name))
        if value:
            return value
    return ""


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = _clean_env(env.get(name)).lower()
    if not value:
        return default
    return value in ("1", "true", "yes", "on")


def _site_name(base_url: str) -> str:
    host = urlparse(base_url).hostname or base_url
    return host[4:] if host.startswith("www.") else host


class Settings(BaseModel):
    """
    Réglages du service (un champ par décision de politique).
    Le secret Stripe est un SecretStr: il n'apparaît ni dans repr() ni dans les logs.
    """
    model_config = ConfigDict(frozen=True)

    provider_secret_key: SecretStr
    site_base_url: str = DEFAULT_SITE_URL
    allowed_origin: str = DEFAULT_SITE_URL
    listen_port: int = DEFAULT_LISTEN_PORT
    deployment_env: Optional[str] = None
    site_name: str = "squarebidness.com"

    # Redirections (toujours construites côté serveur)
    success_path: str = "/success/"
    cancel_path: str = "/cart/"

    # Panier
    currency: str = "usd"
    default_item_name: str = "Square Bidness Item"
    max_name_length: int = 200
    on_invalid_item: Literal["drop", "reject"] = "drop"

    # Options de la session Checkout
    allow_promotion_codes: bool = True
    billing_address_collection: Literal["auto", "required"] = "auto"
    collect_phone_number: bool = False
    automatic_tax: bool = False

    # Client Stripe
    provider_timeout: float = Field(default=20.0, gt=0)
    stripe_api_version: str = "2023-10-16"

    # Rate limiting de la création de session
    rate_limit_redis_url: Optional[str] = None
    local_rate_limit_fallback: bool = False
    checkout_rate_limit: int = Field(default=10, gt=0)
    checkout_rate_window: int = Field(default=60, gt=0)

    @property
    def success_url(self) -> str:
        sep = "&" if "?" in self.success_path else "?"
        return f"{self.site_base_url}{self.success_path}{sep}session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self) -> str:
        return f"{self.site_base_url}{self.cancel_path}"


def settings_from_env(env: Mapping[str, str]) -> Settings:
    """
    Construit Settings depuis un mapping de type os.environ.
    - PROVIDER_SECRET_KEY (alias STRIPE_SECRET_KEY) est obligatoire.
    - Lève ConfigError si une valeur est absente ou invalide.
    """
    secret = _first(env, "PROVIDER_SECRET_KEY", "STRIPE_SECRET_KEY")
    if not secret:
        raise ConfigError("PROVIDER_SECRET_KEY manquant")

    site_base_url = (_first(env, "SITE_BASE_URL", "SITE_URL") or DEFAULT_SITE_URL).rstrip("/")
    if not site_base_url.startswith("http"):
        site_base_url = "https://" + site_base_url

    values = {
        "provider_secret_key": secret,
        "site_base_url": site_base_url,
        "allowed_origin": (_first(env, "ALLOWED_ORIGIN", "ALLOW_ORIGIN") or site_base_url).rstrip("/"),
        "listen_port": _first(env, "LISTEN_PORT", "PORT") or DEFAULT_LISTEN_PORT,
        "deployment_env": _first(env, "DEPLOYMENT_ENV", "VERCEL_ENV") or None,
        "site_name": _first(env, "SITE_NAME") or _site_name(site_base_url),
        "success_path": _first(env, "CHECKOUT_SUCCESS_PATH") or "/success/",
        "cancel_path": _first(env, "CHECKOUT_CANCEL_PATH") or "/cart/",
        "currency": (_first(env, "CHECKOUT_CURRENCY") or "usd").lower(),
        "default_item_name": _first(env, "DEFAULT_ITEM_NAME") or "Square Bidness Item",
        "on_invalid_item": (_first(env, "ON_INVALID_ITEM") or "drop").lower(),
        "allow_promotion_codes": _flag(env, "ALLOW_PROMOTION_CODES", True),
        "billing_address_collection": (_first(env, "BILLING_ADDRESS_COLLECTION") or "auto").lower(),
        "collect_phone_number": _flag(env, "COLLECT_PHONE_NUMBER", False),
        "automatic_tax": _flag(env, "AUTOMATIC_TAX", False),
        "provider_timeout": _first(env, "PROVIDER_TIMEOUT") or 20.0,
        "stripe_api_version": _first(env, "STRIPE_API_VERSION") or "2023-10-16",
        "rate_limit_redis_url": _first(env, "RATE_LIMIT_REDIS_URL") or None,
        "local_rate_limit_fallback": _flag(env, "LOCAL_RATE_LIMIT_FALLBACK", False),
        "checkout_rate_limit": _first(env, "CHECKOUT_RATE_LIMIT") or 10,
        "checkout_rate_window": _first(env, "CHECKOUT_RATE_WINDOW") or 60,
    }
    try:
        return Settings(**values)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigError(f"Configuration invalide: {fields}") from None


def load_settings() -> Settings:
    """Charge .env puis lit l'environnement du process (appelé une fois au démarrage)."""
    load_dotenv(dotenv_path=ENV_PATH, override=False)
    return settings_from_env(os.environ)


def get_settings(request: Request) -> Settings:
    """Dépendance FastAPI: réglages attachés à l'application par la factory."""
    return request.app.state.settings
