from fastapi import Request

from storefront import config


def request_origin(request: Request) -> str:
    """Origine publique pour les URLs de retour: en-tête Origin, sinon SITE_URL."""
    origin = (request.headers.get("origin") or "").strip()
    if not origin or origin == "null":
        origin = config.SITE_URL
    return origin.rstrip("/")
