from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, Request, Response

from .service import CatalogReader

router = APIRouter(prefix="/api/v1/products", tags=["Catalog API"])

CACHE_CONTROL = "public, max-age=300"


def _reader(request: Request) -> CatalogReader:
    reader = getattr(request.app.state, "catalog", None)
    if reader is None:
        reader = CatalogReader.from_config()
        request.app.state.catalog = reader
    return reader


# module storefront.catalog.views
@router.get("")
def list_products(request: Request, response: Response, page: int = Query(0, ge=0)) -> Dict[str, Any]:
    """
    Page de produits (6 par page).
    En-têtes: x-cache (PRECOMPUTED | HIT | MISS) et Cache-Control public 5 min.
    """
    payload, source = _reader(request).get_page(page)
    response.headers["x-cache"] = source
    response.headers["Cache-Control"] = CACHE_CONTROL
    return payload


@router.get("/slugs")
def list_slugs(request: Request) -> List[str]:
    return _reader(request).list_slugs()


@router.get("/{slug}")
def read_product(slug: str, request: Request) -> Dict[str, Any]:
    found = _reader(request).get_product(slug)
    if not found:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return found
