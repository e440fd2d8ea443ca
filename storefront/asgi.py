"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production: `uvicorn storefront.asgi:app` (ou gunicorn -k uvicorn.workers.UvicornWorker).
- Toute la configuration est centralisée dans storefront.app_setup.factory.
"""

from storefront.app_setup.factory import create_app

app = create_app()
