"""
Adaptateur Stripe: centralise les appels et la configuration Stripe Checkout.
"""
import logging
from typing import Any, Dict, List

import stripe
from fastapi import HTTPException

from storefront import config
from .errors import ProviderError

logger = logging.getLogger(__name__)

SUCCESS_PATH = "/confirmation/?success=true&session_id={CHECKOUT_SESSION_ID}"
CANCEL_PATH = "/?canceled=true"

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare le SDK stripe (stripe.api_key).
    - HTTPException(500) si STRIPE_SECRET_KEY est absent (erreur de configuration).
    """
    if not config.STRIPE_SECRET_KEY:
        raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY manquant")
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe


def _as_dict(obj: Any) -> Dict[str, Any]:
    # StripeObject (SDK) ou dict (tests)
    to_dict = getattr(obj, "to_dict", None)
    return to_dict() if callable(to_dict) else dict(obj)


def _provider_error(e: Exception) -> ProviderError:
    status = getattr(e, "http_status", None) or 502
    body = getattr(e, "user_message", None) or str(e)
    return ProviderError(status_code=status, body=body, provider="stripe")


def create_session(
    *,
    line_items: List[Dict[str, Any]],
    origin: str,
    customer_email: str = "",
    payment_method_types: List[str] | None = None,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout (mode "payment").
    - success_url: {origin}/confirmation/?success=true&session_id={CHECKOUT_SESSION_ID}
    - cancel_url: {origin}/?canceled=true
    - billing_address_collection: "required"
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
    Erreurs SDK -> ProviderError (statut HTTP Stripe, message utilisateur).
    """
    require_stripe()
    params: Dict[str, Any] = {
        "line_items": line_items,
        "mode": "payment",
        "payment_method_types": payment_method_types or ["card"],
        "billing_address_collection": "required",
        "success_url": f"{origin}{SUCCESS_PATH}",
        "cancel_url": f"{origin}{CANCEL_PATH}",
    }
    if customer_email:
        params["customer_email"] = customer_email
    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.StripeError as e:
        logger.exception("stripe_client.create_session failed")
        raise _provider_error(e)
    return _as_dict(session)


def get_session(session_id: str) -> Dict[str, Any]:
    """
    Récupère une session Stripe Checkout (payment_intent étendu) pour la page de confirmation.
    """
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id manquant")
    require_stripe()
    try:
        session = stripe.checkout.Session.retrieve(session_id, expand=["payment_intent"])
    except stripe.StripeError as e:
        logger.warning("stripe_client.get_session failed session_id=%s: %s", session_id, e)
        raise _provider_error(e)
    return _as_dict(session)
