"""
Panier: réducteur pur + store persistant.

- cart_reducer(cart, action) -> nouvel état (ne modifie jamais l'entrée)
- normalize(items): fusionne les doublons d'un même produit (somme des quantités)
- CartStore: détient l'état, le persiste après chaque action (clé "cart")
  et se réhydrate une seule fois depuis le stockage à l'ouverture.
"""
import json
import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .storage import CartStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "cart"


class ProductRef(BaseModel):
    """Instantané du produit transporté dans le panier (prix en centimes)."""
    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    name: str = ""
    slug: str = ""
    price: int = 0
    currency: str = "usd"
    description: Optional[str] = None


class CartImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str
    blur_data_url: Optional[str] = Field(default=None, alias="blurDataURL")


class CartItem(BaseModel):
    product: ProductRef
    count: int = Field(default=1, ge=1)
    images: Optional[List[CartImage]] = None

    @property
    def key(self) -> str:
        return str(self.product.id)


class AddItem(BaseModel):
    type: Literal["addItem"] = "addItem"
    item: CartItem


class RemoveItem(BaseModel):
    type: Literal["removeItem"] = "removeItem"
    item: CartItem


class ClearCart(BaseModel):
    type: Literal["clearCart"] = "clearCart"


class Hydrate(BaseModel):
    type: Literal["hydrate"] = "hydrate"
    items: List[CartItem] = Field(default_factory=list)


CartAction = Annotated[Union[AddItem, RemoveItem, ClearCart, Hydrate], Field(discriminator="type")]

_items_adapter = TypeAdapter(List[CartItem])


class UnhandledCartAction(Exception):
    """Action inconnue: erreur de programmation, jamais rattrapée par le store."""

    def __init__(self, action: Any):
        super().__init__(f"Unhandled action type: {action!r}")
        self.action = action


def normalize(items: List[CartItem]) -> List[CartItem]:
    """
    Fusionne les entrées d'un même produit (clé = str(product.id)).
    - L'ordre de première apparition est conservé.
    - Idempotent: normalize(normalize(x)) == normalize(x).
    """
    merged: Dict[str, CartItem] = {}
    for it in items:
        existing = merged.get(it.key)
        if existing:
            merged[it.key] = existing.model_copy(update={"count": existing.count + it.count})
        else:
            merged[it.key] = it.model_copy()
    return list(merged.values())


def _index_of(items: List[CartItem], key: str) -> int:
    for idx, it in enumerate(items):
        if it.key == key:
            return idx
    return -1


def cart_reducer(cart: List[CartItem], action: Any) -> List[CartItem]:
    """
    Transitions du panier:
    - addItem: +1 si le produit existe, sinon ajout avec count=1 (le count du payload est ignoré)
    - removeItem: -1 si count > 1, suppression si count == 1, no-op (état normalisé) si absent
    - clearCart: panier vide
    - hydrate: normalize(items)
    """
    if isinstance(action, AddItem):
        current = normalize(cart)
        idx = _index_of(current, action.item.key)
        if idx > -1:
            return [
                it.model_copy(update={"count": it.count + 1}) if i == idx else it
                for i, it in enumerate(current)
            ]
        # count forcé à 1 même si le payload en porte un autre
        return current + [action.item.model_copy(update={"count": 1})]

    if isinstance(action, RemoveItem):
        current = normalize(cart)
        idx = _index_of(current, action.item.key)
        if idx == -1:
            return current
        if current[idx].count > 1:
            return [
                it.model_copy(update={"count": it.count - 1}) if i == idx else it
                for i, it in enumerate(current)
            ]
        return [it for i, it in enumerate(current) if i != idx]

    if isinstance(action, ClearCart):
        return []

    if isinstance(action, Hydrate):
        return normalize(action.items)

    raise UnhandledCartAction(action)


def cart_total(items: List[CartItem]) -> int:
    """Total en centimes: somme de price * count."""
    return sum(it.product.price * it.count for it in items)


class CartStore:
    """
    Store explicite du panier, construit par requête (ou par script).
    Cycle de vie:
      1) __init__ + hydrate_from_storage(): une seule lecture de la clé "cart"
      2) dispatch(action): réducteur puis sérialisation complète vers le stockage
    """

    def __init__(self, storage: CartStorage, key: str = STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._items: List[CartItem] = []
        self._hydrated = False

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> int:
        return cart_total(self._items)

    @property
    def count(self) -> int:
        return sum(it.count for it in self._items)

    def hydrate_from_storage(self) -> None:
        if self._hydrated:
            return
        self._hydrated = True
        raw = self._storage.get_item(self._key)
        if not raw:
            return
        try:
            parsed = json.loads(raw)
            if not isinstance(parsed, list):
                logger.warning("cart.store ignoring persisted cart: not an array (%s)", type(parsed).__name__)
                return
            items = _items_adapter.validate_python(parsed)
        except (ValueError, ValidationError) as e:
            logger.warning("cart.store failed to hydrate persisted cart: %s", e)
            return
        self._items = cart_reducer(self._items, Hydrate(items=items))
        # réécriture seulement si la normalisation a changé le contenu stocké
        if self._serialize() != raw:
            self._persist()

    def dispatch(self, action: Any) -> List[CartItem]:
        self._items = cart_reducer(self._items, action)
        self._persist()
        return self.items

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [it.model_dump(mode="json", by_alias=True, exclude_none=True) for it in self._items],
            "total": self.total,
            "count": self.count,
        }

    def _serialize(self) -> str:
        return json.dumps(
            [it.model_dump(mode="json", by_alias=True, exclude_none=True) for it in self._items],
            ensure_ascii=False,
        )

    def _persist(self) -> None:
        payload = self._serialize()
        try:
            self._storage.set_item(self._key, payload)
        except Exception:
            logger.warning("cart.store failed to save cart", exc_info=True)
