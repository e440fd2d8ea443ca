"""
Construction des line_items (format Stripe) à partir du panier.
Transformation pure: pas de Stripe, pas de DB.
"""
from typing import List

from fastapi import HTTPException

from storefront.cart.store import CartItem
from storefront.utils.html import strip_markup
from .models import AdjustableQuantity, LineItem, PriceData, ProductData

DESCRIPTION_MAX_LENGTH = 500

# module storefront.payments.line_items
def cart_item_to_line_item(item: CartItem) -> LineItem:
    """
    Convertit un CartItem en line item provider.
    - currency: reprise telle quelle du produit (non validée)
    - unit_amount: prix produit en centimes, sans conversion ni arrondi
    - description: texte brut sans balises, tronqué à 500 caractères (omise si vide)
    - quantity: item.count
    """
    product = item.product
    description = strip_markup(product.description, DESCRIPTION_MAX_LENGTH)
    return LineItem(
        price_data=PriceData(
            currency=product.currency,
            unit_amount=product.price,
            product_data=ProductData(name=product.name, description=description or None),
        ),
        quantity=item.count,
        adjustable_quantity=AdjustableQuantity(enabled=True),
    )


def cart_to_line_items(items: List[CartItem]) -> List[LineItem]:
    """Soulève HTTPException(400) si le panier est vide."""
    if not items:
        raise HTTPException(status_code=400, detail="Panier vide")
    return [cart_item_to_line_item(it) for it in items]
