import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Request

from storefront.cart.dependencies import get_cart_store
from storefront.cart.store import CartStore, ClearCart
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.request import request_origin
from . import gateway, paypal_client, stripe_client
from .bitcoin import bitcoin_payment_info
from .capture import capture_order
from .models import CaptureRequest, CheckoutRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Payments API"])

# module storefront.payments.views
@router.post("/checkout_sessions", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_checkout_session(payload: CheckoutRequest, request: Request) -> Dict[str, Any]:
    """
    Crée une redirection de paiement pour des line_items fournis par le client.
    - Body: {line_items: [...], customer_email, payment_method: stripe|paypal|bancontact|Bitcoin}
    - Retour: {"url": ...} (+ session Stripe ou ordre PayPal selon le provider)
    - Erreurs provider: {"error": <corps provider>} avec le statut du provider
    """
    return await gateway.create_checkout(payload, request_origin(request))


@router.get("/checkout_sessions/{session_id}")
def read_checkout_session(session_id: str, store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    """
    Session Stripe pour la page de confirmation (payment_intent étendu).
    Vide le panier de la session si payment_status == "paid".
    """
    session = stripe_client.get_session(session_id)
    if session.get("payment_status") == "paid":
        store.dispatch(ClearCart())
        logger.info("checkout session paid id=%s, cart cleared", session_id)
    return session


@router.post("/paypal/capture", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def paypal_capture(payload: CaptureRequest, store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    """
    Capture idempotente d'un ordre PayPal approuvé (?token= du retour PayPal).
    - Rejouer la même requête renvoie la capture existante (alreadyCaptured=true)
    - Succès: le panier de la session est vidé
    """
    async with paypal_client.from_config() as client:
        result = await capture_order(client, payload.token)
    store.dispatch(ClearCart())
    return result.to_response()


@router.get("/bitcoin")
def bitcoin_info(
    amount: int = Query(0, ge=0, description="Montant en centimes"),
    currency: str = Query("usd", min_length=3, max_length=3),
) -> Dict[str, Any]:
    """Adresse, montant et QR code pour un paiement Bitcoin manuel (sans vérification)."""
    return bitcoin_payment_info(amount, currency)
