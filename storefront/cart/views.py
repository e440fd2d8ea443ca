import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from storefront.payments import gateway
from storefront.payments.line_items import cart_to_line_items
from storefront.payments.models import CartCheckoutRequest, CheckoutRequest
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.request import request_origin
from .dependencies import get_cart_store
from .store import AddItem, CartAction, CartItem, CartStore, ClearCart, ProductRef, RemoveItem

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])

# module storefront.cart.views
@router.get("")
def read_cart(store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    """Contenu du panier de la session: {items, total, count}."""
    return store.to_dict()


@router.post("/items")
def add_item(item: CartItem, store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    """Ajoute une unité du produit (le count envoyé n'est pas pris en compte)."""
    store.dispatch(AddItem(item=item))
    return store.to_dict()


@router.delete("/items/{product_id}")
def remove_item(product_id: str, store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    """Retire une unité du produit; sans effet si le produit n'est pas dans le panier."""
    store.dispatch(RemoveItem(item=CartItem(product=ProductRef(id=product_id))))
    return store.to_dict()


@router.delete("")
def clear_cart(store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    store.dispatch(ClearCart())
    return store.to_dict()


@router.post("/dispatch")
def dispatch_action(action: CartAction, store: CartStore = Depends(get_cart_store)) -> Dict[str, Any]:
    """
    Applique une action brute du réducteur.
    Body: {"type": "addItem"|"removeItem", "item": {...}} | {"type": "clearCart"} | {"type": "hydrate", "items": [...]}
    Un type inconnu est rejeté en 422 par la validation.
    """
    store.dispatch(action)
    return store.to_dict()


@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def checkout_cart(
    payload: CartCheckoutRequest,
    request: Request,
    store: CartStore = Depends(get_cart_store),
) -> Dict[str, Any]:
    """
    Checkout depuis le panier de la session.
    - Construit les line_items (400 si panier vide)
    - Délègue au routage provider (Stripe, Bancontact, PayPal, Bitcoin)
    - Le panier n'est vidé qu'à la confirmation du paiement
    """
    line_items = cart_to_line_items(store.items)
    checkout = CheckoutRequest(
        line_items=line_items,
        customer_email=payload.customer_email,
        payment_method=payload.payment_method,
    )
    result = await gateway.create_checkout(checkout, request_origin(request))
    logger.info("cart.checkout method=%s items=%s", payload.payment_method, len(line_items))
    return result
