"""
Module 'cart': point d'entrée public.
Réunit le réducteur, les modèles, le store persistant et les stockages.
"""

from .store import (
    STORAGE_KEY,
    ProductRef,
    CartImage,
    CartItem,
    AddItem,
    RemoveItem,
    ClearCart,
    Hydrate,
    CartAction,
    UnhandledCartAction,
    normalize,
    cart_reducer,
    cart_total,
    CartStore,
)
from .storage import CartStorage, MemoryStorage, SessionStorage

__all__ = [
    # modèles
    "ProductRef",
    "CartImage",
    "CartItem",
    # actions
    "AddItem",
    "RemoveItem",
    "ClearCart",
    "Hydrate",
    "CartAction",
    "UnhandledCartAction",
    # réducteur
    "normalize",
    "cart_reducer",
    "cart_total",
    # store
    "STORAGE_KEY",
    "CartStore",
    "CartStorage",
    "MemoryStorage",
    "SessionStorage",
]
