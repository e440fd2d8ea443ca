"""
Modèles d'échange (validés à la frontière HTTP) pour la feature 'payments'.
"""
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

PaymentMethod = Literal["stripe", "paypal", "bancontact", "Bitcoin"]


class ProductData(BaseModel):
    name: str
    description: Optional[str] = None
    images: Optional[List[str]] = None


class PriceData(BaseModel):
    currency: str
    unit_amount: Optional[int] = None
    unit_amount_decimal: Optional[Union[Decimal, int, str]] = None
    product_data: ProductData

    def minor_units(self) -> Decimal:
        """Montant unitaire en centimes (unit_amount_decimal prioritaire)."""
        raw = self.unit_amount_decimal if self.unit_amount_decimal is not None else self.unit_amount
        return Decimal(str(raw or 0))


class AdjustableQuantity(BaseModel):
    enabled: bool = True


class LineItem(BaseModel):
    price_data: PriceData
    quantity: int = Field(default=1, ge=1)
    adjustable_quantity: Optional[AdjustableQuantity] = None

    def to_stripe(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class CheckoutRequest(BaseModel):
    line_items: List[LineItem] = Field(min_length=1)
    customer_email: str = ""
    payment_method: PaymentMethod = "stripe"


class CartCheckoutRequest(BaseModel):
    customer_email: str = ""
    payment_method: PaymentMethod = "stripe"


class CaptureRequest(BaseModel):
    token: str = Field(min_length=1)


class CaptureResult(BaseModel):
    """Réponse de capture PayPal (champs additionnels du provider conservés)."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    already_captured: bool = Field(alias="alreadyCaptured")
    capture: Optional[Dict[str, Any]] = None
    order: Optional[Any] = None
    items: List[str] = Field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
