"""
Lecture du catalogue: fichier précalculé -> cache mémoire (TTL) -> base + images.
Construit une fois au démarrage (lifespan) et conservé sur app.state.catalog.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from storefront import config
from storefront.utils.html import sanitize_html
from . import repository
from .cache import TTLCache, load_precomputed_page
from .images import page_images_entry, product_images

logger = logging.getLogger(__name__)

PRECOMPUTED = "PRECOMPUTED"
HIT = "HIT"
MISS = "MISS"


class CatalogReader:
    def __init__(
        self,
        *,
        page_size: int = 6,
        cache: Optional[TTLCache] = None,
        precomputed_file: Optional[Path] = None,
        products_dir: Optional[Path] = None,
    ):
        self.page_size = page_size
        self.cache = cache or TTLCache(config.PRODUCTS_CACHE_TTL_SECONDS)
        self.precomputed_file = precomputed_file
        self.products_dir = products_dir

    @classmethod
    def from_config(cls) -> "CatalogReader":
        return cls(
            page_size=config.PRODUCTS_PAGE_SIZE,
            cache=TTLCache(config.PRODUCTS_CACHE_TTL_SECONDS),
            precomputed_file=config.PRECOMPUTED_CACHE_FILE,
            products_dir=config.PRODUCTS_DIR,
        )

    def get_page(self, page: int) -> Tuple[Dict[str, Any], str]:
        """
        Page N du catalogue.
        Retour: (payload {products, images, page, pageSize, count}, source PRECOMPUTED|HIT|MISS)
        """
        if self.precomputed_file is not None:
            precomputed = load_precomputed_page(self.precomputed_file, page)
            if precomputed is not None:
                return precomputed, PRECOMPUTED

        key = f"products:page:{page}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached, HIT

        products = repository.fetch_products_page(page, self.page_size)
        images: List[Dict[str, Any]] = []
        for product in products:
            entry = page_images_entry(product.get("id"), self.products_dir)
            if entry is not None:
                images.append(entry)
        payload = {
            "products": products,
            "images": images,
            "page": page,
            "pageSize": self.page_size,
            "count": repository.count_products(),
        }
        self.cache.set(key, payload)
        logger.info("catalog page=%s computed products=%s", page, len(products))
        return payload, MISS

    def get_product(self, slug: str) -> Optional[Dict[str, Any]]:
        """Fiche produit {product, images} (description nettoyée); None si slug inconnu."""
        product = repository.get_product_by_slug(slug)
        if not product:
            return None
        product = {**product, "description": sanitize_html(product.get("description"))}
        return {"product": product, "images": product_images(product.get("id"), self.products_dir)}

    def list_slugs(self) -> List[str]:
        return repository.list_product_slugs()
