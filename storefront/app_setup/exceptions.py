"""
Gestionnaires d'exceptions.
- ProviderError (Stripe/PayPal): {"error": <corps provider>} avec le statut du provider, tel quel.
- Les autres erreurs HTTP gardent la forme FastAPI {"detail": ...}.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.payments.errors import ProviderError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError):
        logger.warning(
            "provider error provider=%s status=%s path=%s",
            exc.provider, exc.status_code, request.url.path,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.body})
