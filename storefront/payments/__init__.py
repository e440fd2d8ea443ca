"""
Module 'payments': point d'entrée public.
Rassemble le routage provider (Stripe, PayPal, Bitcoin), la construction des line_items
et la capture PayPal idempotente.
"""

from .errors import ProviderError, PayPalError, PayPalConfigError
from .models import (
    PaymentMethod,
    LineItem,
    CheckoutRequest,
    CartCheckoutRequest,
    CaptureRequest,
    CaptureResult,
)
from .line_items import cart_item_to_line_item, cart_to_line_items
from .stripe_client import require_stripe, create_session, get_session
from .paypal_client import PayPalClient
from .gateway import build_paypal_order, create_checkout
from .capture import capture_order, find_completed_capture, extract_item_names
from .bitcoin import bitcoin_payment_info

__all__ = [
    # erreurs
    "ProviderError",
    "PayPalError",
    "PayPalConfigError",
    # modèles
    "PaymentMethod",
    "LineItem",
    "CheckoutRequest",
    "CartCheckoutRequest",
    "CaptureRequest",
    "CaptureResult",
    # line items
    "cart_item_to_line_item",
    "cart_to_line_items",
    # stripe
    "require_stripe",
    "create_session",
    "get_session",
    # paypal
    "PayPalClient",
    "build_paypal_order",
    "create_checkout",
    "capture_order",
    "find_completed_capture",
    "extract_item_names",
    # bitcoin
    "bitcoin_payment_info",
]
