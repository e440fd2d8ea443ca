"""
Paiement Bitcoin 'manuel': informations d'affichage uniquement.
Le client envoie lui-même le montant à l'adresse du marchand; aucune vérification
on-chain n'est faite (confirmation déclarative).
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from storefront import config
from storefront.utils.qrcode_utils import generate_qr_code

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {"usd": "$", "eur": "€"}


def currency_symbol(currency: str) -> Optional[str]:
    return CURRENCY_SYMBOLS.get((currency or "").lower())


def bitcoin_payment_info(amount_in_cents: int = 0, currency: str = "usd") -> Dict[str, Any]:
    """
    Données de la page de paiement Bitcoin.
    - amount: montant en unités majeures, deux décimales (ex: "12.50")
    - uri/qr_code: None si BITCOIN_ADDRESS n'est pas configurée
    """
    currency = (currency or "usd").lower()
    amount = (Decimal(amount_in_cents or 0) / 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    address = config.BITCOIN_ADDRESS or None
    if not address:
        logger.warning("bitcoin payment requested but BITCOIN_ADDRESS is not configured")

    uri = f"bitcoin:{address}" if address else None
    return {
        "configured": address is not None,
        "address": address,
        "amount": f"{amount:.2f}",
        "currency": currency,
        "symbol": currency_symbol(currency),
        "uri": uri,
        "qr_code": generate_qr_code(uri) if uri else None,
    }
