"""
Stockages durables pour le panier (clé/valeur de chaînes JSON).
- MemoryStorage: dict en mémoire (tests, scripts).
- SessionStorage: session signée Starlette (SessionMiddleware), un panier par navigateur.
"""
from typing import Any, Dict, MutableMapping, Optional, Protocol


class CartStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes = 0

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        self.data[key] = value


class SessionStorage:
    """Adapte request.session (dict sérialisé dans le cookie de session)."""

    def __init__(self, session: MutableMapping[str, Any]):
        self._session = session

    def get_item(self, key: str) -> Optional[str]:
        value = self._session.get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        self._session[key] = value
