from typing import Any, Dict

from fastapi import APIRouter, Request

from storefront import config
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])


def providers_info() -> Dict[str, Any]:
    """Providers configurés (booléens uniquement, jamais les secrets)."""
    return {
        "stripe": bool(config.STRIPE_SECRET_KEY),
        "paypal": bool(config.PAYPAL_CLIENT_ID and config.PAYPAL_CLIENT_SECRET),
        "paypal_env": "live" if config.PAYPAL_ENV == "live" else "sandbox",
        "bitcoin": bool(config.BITCOIN_ADDRESS),
        "supabase": bool(config.SUPABASE_URL and config.SUPABASE_KEY),
    }


@router.get("")
def health_root():
    return {"ok": True}


@router.get("/providers")
def health_providers(request: Request):
    return {**providers_info(), "rate_limit": rate_limit_health_info(request)}
