"""
Découverte des images produit sous PRODUCTS_DIR/{id}.
- Fichiers image uniquement (jpg, jpeg, png, webp, gif, avif, svg), triés par nom
- manifest.json optionnel: {"main": "a.jpg", "demos": ["b.jpg", ...]} fixe l'ordre
  main -> demos -> reste; manifest illisible ou invalide: ordre du répertoire
- Chemins publics: /products/{id}/{fichier}
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from storefront import config

logger = logging.getLogger(__name__)

IMAGE_FILE = re.compile(r"\.(jpe?g|png|webp|gif|avif|svg)$", re.IGNORECASE)
MANIFEST_NAME = "manifest.json"


def _read_manifest(directory: Path) -> Optional[Dict[str, Any]]:
    path = directory / MANIFEST_NAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("catalog.images invalid manifest %s, using directory order", path)
        return None
    return data if isinstance(data, dict) else None


def order_by_manifest(names: List[str], manifest: Optional[Dict[str, Any]]) -> List[str]:
    """main (si présent sur disque), puis demos présents non déjà placés, puis le reste."""
    if not manifest:
        return list(names)
    main = manifest.get("main") if isinstance(manifest.get("main"), str) else None
    raw_demos = manifest.get("demos")
    demos = [d for d in raw_demos if isinstance(d, str)] if isinstance(raw_demos, list) else []
    if not main and not demos:
        return list(names)

    ordered: List[str] = []
    if main and main in names:
        ordered.append(main)
    for d in demos:
        if d in names and d not in ordered:
            ordered.append(d)
    return ordered + [n for n in names if n not in ordered]


def discover_product_images(product_id: Any, products_dir: Optional[Path] = None) -> Optional[List[str]]:
    """
    Noms de fichiers image ordonnés pour un produit.
    Retour None (avec warning) si le répertoire du produit n'existe pas.
    """
    directory = Path(products_dir or config.PRODUCTS_DIR) / str(product_id)
    if not directory.is_dir():
        logger.warning("catalog.images product %s has no images under %s", product_id, directory)
        return None
    names = sorted(p.name for p in directory.iterdir() if p.is_file() and IMAGE_FILE.search(p.name))
    ordered = order_by_manifest(names, _read_manifest(directory))
    if ordered != names:
        logger.debug("catalog.images manifest ordering applied for product %s", product_id)
    return ordered


def public_path(product_id: Any, name: str) -> str:
    return f"/products/{product_id}/{name}"


def product_images(product_id: Any, products_dir: Optional[Path] = None) -> List[Dict[str, Any]]:
    """[{path, blurDataURL}] pour la fiche produit ([] si aucun répertoire)."""
    names = discover_product_images(product_id, products_dir) or []
    return [{"path": public_path(product_id, n), "blurDataURL": None} for n in names]


def page_images_entry(product_id: Any, products_dir: Optional[Path] = None) -> Optional[Dict[str, Any]]:
    """
    Entrée 'images' d'une page de liste:
    {id, images: {paths, blurDataURLs, mainPath, mainBlur}}; None si aucun répertoire.
    mainPath: première image (main du manifest le cas échéant).
    """
    names = discover_product_images(product_id, products_dir)
    if names is None:
        return None
    paths = [public_path(product_id, n) for n in names]
    return {
        "id": product_id,
        "images": {
            "paths": paths,
            "blurDataURLs": [None] * len(paths),
            "mainPath": paths[0] if paths else None,
            "mainBlur": None,
        },
    }
