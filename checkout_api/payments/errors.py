"""
Erreurs métier de la feature 'payments'.
Ce sont des HTTPException: le statut et le message client sont fixés ici,
le détail technique reste dans les logs.
"""
from fastapi import HTTPException

# module checkout_api.payments.errors
SERVER_ERROR_MESSAGE = "Server error"


class CheckoutError(HTTPException):
    status_code = 500
    message = SERVER_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        super().__init__(status_code=self.status_code, detail=message or self.message)


class NoItems(CheckoutError):
    status_code = 400
    message = "No items provided"


class NoPurchasableItems(CheckoutError):
    status_code = 400
    message = "No purchasable items"


class InvalidItem(CheckoutError):
    status_code = 400
    message = "Invalid item"

    def __init__(self, index: int):
        super().__init__(f"Invalid price at index {index}")
        self.index = index


class MissingSessionId(CheckoutError):
    status_code = 400
    message = "Missing session_id"


class SessionNotFound(CheckoutError):
    status_code = 404
    message = "Session not found"


class TooManyRequests(CheckoutError):
    status_code = 429
    message = "Too Many Requests"


class ProviderError(CheckoutError):
    """Stripe a refusé ou n'a pas pu traiter l'appel."""


class ServerError(CheckoutError):
    """Échec inattendu côté serveur."""
