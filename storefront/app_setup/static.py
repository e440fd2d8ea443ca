"""
Montage des fichiers statiques.
- /products -> PUBLIC_DIR/products (images produit découvertes par le catalogue)
"""
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from storefront import config


def mount_static_files(app: FastAPI) -> None:
    # check_dir=False: le répertoire peut être créé après le démarrage
    app.mount("/products", StaticFiles(directory=str(config.PRODUCTS_DIR), check_dir=False), name="products")
