from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# module checkout_api.payments.models


class NormalizedLineItem(BaseModel):
    """Ligne de panier assainie, prête à être envoyée à Stripe (montant en centimes)."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    unit_amount: int = Field(ge=0)
    quantity: int = Field(ge=1)
    images: List[str] = Field(default_factory=list, max_length=1)

    def as_cart_item(self) -> dict:
        # Forme "panier client" équivalente, pour re-normaliser
        item = {"name": self.name, "price": self.unit_amount / 100, "qty": self.quantity}
        if self.images:
            item["image"] = self.images[0]
        return item


class CheckoutSessionCreated(BaseModel):
    id: str
    url: str


class LineItemSummary(BaseModel):
    description: Optional[str] = None
    quantity: Optional[int] = None
    unit_amount: Optional[int] = None
    currency: Optional[str] = None


class SessionSummary(BaseModel):
    id: str
    customer_email: Optional[str] = None
    currency: Optional[str] = None
    amount_total: Optional[int] = None
    payment_status: Optional[str] = None
    line_items: List[LineItemSummary] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
