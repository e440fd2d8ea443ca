from typing import Any, Dict, List, Optional
from storefront.infra.supabase_client import get_supabase
import logging

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "*, brand:brands(*)"


def fetch_products_page(page: int, page_size: int) -> List[dict]:
    """Produits de la page (offset = page * page_size), triés par id, marque jointe."""
    start = max(page, 0) * page_size
    try:
        res = (
            get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .order("id", desc=False)
            .range(start, start + page_size - 1)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("catalog.repository.fetch_products_page failed page=%s", page)
        return []


def count_products() -> int:
    try:
        res = get_supabase().table("products").select("id", count="exact").limit(1).execute()
        return int(getattr(res, "count", None) or 0)
    except Exception:
        logger.exception("catalog.repository.count_products failed")
        return 0


def get_product_by_slug(slug: str) -> Optional[dict]:
    if not slug:
        return None
    try:
        res = (
            get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .eq("slug", slug)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("catalog.repository.get_product_by_slug failed slug=%s", slug)
        return None


def list_product_slugs() -> List[str]:
    try:
        res = get_supabase().table("products").select("slug").order("id", desc=False).execute()
        return [row["slug"] for row in (res.data or []) if row.get("slug")]
    except Exception:
        logger.exception("catalog.repository.list_product_slugs failed")
        return []
