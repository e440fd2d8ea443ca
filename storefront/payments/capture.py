"""
Capture PayPal idempotente (retour du client après approbation, ?token=...).

Protocole:
  1) GET de l'ordre
  2) capture COMPLETED déjà présente -> renvoyée telle quelle (alreadyCaptured=True), sans nouvel appel
  3) sinon POST /capture
  4) échec de capture -> relecture de l'ordre; capture COMPLETED trouvée -> alreadyCaptured=True,
     sinon l'échec d'origine est propagé (statut + corps)
  5) succès -> relecture de l'ordre pour la liste d'articles faisant foi

Aucun verrou local: la fenêtre de course entre (2) et (3) est couverte par le refus
de PayPal sur la seconde capture puis par la relecture (4).
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from .errors import PayPalError
from .models import CaptureResult
from .paypal_client import PayPalClient

logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"

# module storefront.payments.capture
def _captures(resource: Any) -> Iterable[Dict[str, Any]]:
    if not isinstance(resource, dict):
        return []
    found: List[Dict[str, Any]] = []
    for unit in resource.get("purchase_units") or []:
        payments = (unit or {}).get("payments") or {}
        found.extend(c for c in payments.get("captures") or [] if isinstance(c, dict))
    return found


def find_completed_capture(resource: Any) -> Optional[Dict[str, Any]]:
    """Première capture au statut COMPLETED (toutes purchase_units confondues)."""
    for capture in _captures(resource):
        if str(capture.get("status") or "").upper() == COMPLETED:
            return capture
    return None


def extract_item_names(order: Any) -> List[str]:
    """
    Noms des articles de l'ordre (purchase_units[*].items[*].name).
    Ne lève jamais: retourne [] si la structure est inattendue.
    """
    try:
        return [
            it["name"]
            for unit in order.get("purchase_units") or []
            for it in unit.get("items") or []
            if it and it.get("name")
        ]
    except Exception:
        logger.warning("paypal.capture could not extract item names", exc_info=True)
        return []


async def capture_order(client: PayPalClient, token: str) -> CaptureResult:
    """
    Capture idempotente d'un ordre PayPal approuvé.
    - client: PayPalClient déjà ouvert (async with)
    - Lève PayPalError si l'ordre est illisible ou si la capture échoue sans capture existante.
    """
    order = await client.get_order(token)
    completed = find_completed_capture(order)
    if completed:
        logger.info("paypal.capture already captured token=%s capture=%s", token, completed.get("id"))
        return CaptureResult(already_captured=True, capture=completed, order=order, items=extract_item_names(order))

    try:
        captured = await client.capture_order(token)
    except PayPalError as capture_error:
        logger.warning("paypal.capture failed token=%s status=%s, re-checking order", token, capture_error.status_code)
        try:
            recheck = await client.get_order(token)
        except PayPalError:
            logger.warning("paypal.capture re-check failed token=%s", token, exc_info=True)
            raise capture_error
        found = find_completed_capture(recheck)
        if found:
            logger.info("paypal.capture recovered existing capture token=%s capture=%s", token, found.get("id"))
            return CaptureResult(already_captured=True, capture=found, order=recheck, items=extract_item_names(recheck))
        raise capture_error

    extra: Dict[str, Any] = captured if isinstance(captured, dict) else {"result": captured}
    extra = {k: v for k, v in extra.items() if k not in ("alreadyCaptured", "capture", "order", "items")}
    try:
        order_after = await client.get_order(token)
    except PayPalError:
        logger.warning("paypal.capture could not refresh order token=%s", token, exc_info=True)
        return CaptureResult(
            already_captured=False,
            capture=find_completed_capture(captured),
            order=None,
            items=[],
            **extra,
        )

    logger.info("paypal.capture completed token=%s", token)
    return CaptureResult(
        already_captured=False,
        capture=find_completed_capture(captured) or find_completed_capture(order_after),
        order=order_after,
        items=extract_item_names(order_after),
        **extra,
    )
