"""
Cas d'usage 'checkout': route une demande vers Stripe, PayPal ou l'affichage Bitcoin
et renvoie toujours une URL de redirection ({"url": ...}).
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from storefront import config
from . import stripe_client
from . import paypal_client
from .errors import PayPalError
from .models import CheckoutRequest, LineItem

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# module storefront.payments.gateway
def _major_units(minor: Decimal) -> Decimal:
    return (minor / 100).quantize(CENTS, rounding=ROUND_HALF_UP)


def build_paypal_order(line_items: List[LineItem], origin: str) -> Dict[str, Any]:
    """
    Construit le corps de création d'ordre PayPal depuis des line_items (montants en centimes).
    - Devise: celle du premier article, en majuscules (USD par défaut).
    - Chaque montant unitaire devient une chaîne à deux décimales en unités majeures.
    - Le total est la somme unit_amount * quantity.
    """
    if not line_items:
        raise ValueError("No line items provided for PayPal order")

    currency = (line_items[0].price_data.currency or "USD").upper()
    items: List[Dict[str, Any]] = []
    total = Decimal("0.00")
    for li in line_items:
        unit_value = _major_units(li.price_data.minor_units())
        items.append({
            "name": li.price_data.product_data.name or "Item",
            "unit_amount": {"currency_code": currency, "value": f"{unit_value:.2f}"},
            "quantity": str(li.quantity),
        })
        total += unit_value * li.quantity
    total_str = f"{total.quantize(CENTS):.2f}"

    return {
        "intent": "CAPTURE",
        "purchase_units": [
            {
                "amount": {
                    "currency_code": currency,
                    "value": total_str,
                    "breakdown": {"item_total": {"currency_code": currency, "value": total_str}},
                },
                "items": items,
            }
        ],
        "application_context": {
            "brand_name": config.SITE_NAME,
            "landing_page": "NO_PREFERENCE",
            "user_action": "PAY_NOW",
            # PayPal ajoute ?token=... à return_url après approbation
            "return_url": f"{origin}/confirmation/?success=true&provider=paypal",
            "cancel_url": f"{origin}/?canceled=true&provider=paypal",
        },
    }


def find_approve_link(order: Dict[str, Any]) -> Optional[str]:
    for link in (order or {}).get("links") or []:
        if isinstance(link, dict) and link.get("rel") == "approve":
            return link.get("href")
    return None


async def create_paypal_order(line_items: List[LineItem], origin: str, client: Optional[paypal_client.PayPalClient] = None) -> Dict[str, Any]:
    """
    Crée un ordre PayPal et renvoie {"url": <lien approve>, "order": <ordre>}.
    - PayPalError(502) si la réponse ne contient aucun lien rel="approve".
    """
    payload = build_paypal_order(line_items, origin)
    async with (client or paypal_client.from_config()) as pp:
        order = await pp.create_order(payload)
    approve = find_approve_link(order)
    if not approve:
        logger.error("paypal order without approve link id=%s", (order or {}).get("id"))
        raise PayPalError(status_code=502, body={"message": "No approval link in PayPal order", "order": order})
    logger.info("paypal order created id=%s", order.get("id"))
    return {"url": approve, "order": order}


def bitcoin_redirect(line_items: List[LineItem], origin: str) -> Dict[str, Any]:
    """URL de la page d'information Bitcoin (montant total en centimes + devise)."""
    currency = (line_items[0].price_data.currency or "usd").lower()
    amount = sum(li.price_data.minor_units() * li.quantity for li in line_items)
    query = urlencode({"amount": int(amount), "currency": currency})
    return {"url": f"{origin}/bitcoin-payment?{query}", "amount": int(amount), "currency": currency}


async def create_checkout(request: CheckoutRequest, origin: str, client: Optional[paypal_client.PayPalClient] = None) -> Dict[str, Any]:
    """
    Point d'entrée unique du checkout:
    - paypal: ordre PayPal -> lien approve
    - Bitcoin: page d'information (pas d'appel provider)
    - bancontact: session Stripe avec payment_method_types=["bancontact"]
    - stripe (défaut): session Stripe carte
    """
    origin = (origin or config.SITE_URL).rstrip("/")
    method = request.payment_method
    if method == "paypal":
        return await create_paypal_order(request.line_items, origin, client=client)
    if method == "Bitcoin":
        return bitcoin_redirect(request.line_items, origin)

    types = ["bancontact"] if method == "bancontact" else ["card"]
    session = stripe_client.create_session(
        line_items=[li.to_stripe() for li in request.line_items],
        origin=origin,
        customer_email=request.customer_email,
        payment_method_types=types,
    )
    logger.info("stripe session created id=%s method=%s", session.get("id"), method)
    return session
