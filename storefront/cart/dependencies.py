"""
Dépendances FastAPI du panier.
Un CartStore est construit pour chaque requête et réhydraté une fois depuis la session
signée (SessionMiddleware); aucun état panier n'est conservé côté serveur.
"""
from fastapi import Request

from .storage import SessionStorage
from .store import CartStore


def get_cart_store(request: Request) -> CartStore:
    store = CartStore(SessionStorage(request.session))
    store.hydrate_from_storage()
    return store
