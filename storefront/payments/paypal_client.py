"""
Adaptateur PayPal (REST v2 Orders) basé sur httpx.AsyncClient.

- Jeton OAuth2 client_credentials obtenu à la demande et gardé sur l'instance
  uniquement (pas de cache inter-requêtes).
- Toute réponse non 2xx devient PayPalError(status, corps) pour être
  transmise telle quelle à l'appelant.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from storefront import config
from .errors import PayPalConfigError, PayPalError

logger = logging.getLogger(__name__)


def _parse_body(response: httpx.Response) -> Any:
    """Corps JSON si possible, sinon texte brut."""
    try:
        return response.json()
    except ValueError:
        return response.text


class PayPalClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._access_token: Optional[str] = None

    async def __aenter__(self) -> "PayPalClient":
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self._timeout, connect=5.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        if self._http is None:
            raise RuntimeError("PayPalClient must be used as an async context manager")
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.exception("paypal network error %s %s", method, path)
            raise PayPalError(status_code=502, body=f"Failed to connect to PayPal API: {e!s}")

    async def get_access_token(self) -> str:
        """
        POST /v1/oauth2/token (grant_type=client_credentials, auth Basic).
        - PayPalConfigError si identifiants absents.
        - PayPalError(status, corps) si le provider refuse.
        - PayPalError(502, corps) si la réponse ne contient pas de access_token.
        """
        if self._access_token:
            return self._access_token
        if not self.client_id or not self.client_secret:
            raise PayPalConfigError()
        res = await self._send(
            "POST",
            "/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            content="grant_type=client_credentials",
        )
        body = _parse_body(res)
        if res.is_error:
            logger.error("paypal token request failed status=%s body=%s", res.status_code, body)
            raise PayPalError(status_code=res.status_code, body=body)
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            logger.error("paypal token response without access_token body=%s", body)
            raise PayPalError(status_code=502, body=body)
        self._access_token = token
        return self._access_token

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        token = await self.get_access_token()
        res = await self._send(
            method,
            path,
            json=json,
            headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
        )
        body = _parse_body(res)
        if res.is_error:
            raise PayPalError(status_code=res.status_code, body=body)
        return body

    async def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/v2/checkout/orders", json=payload)

    async def get_order(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v2/checkout/orders/{token}")

    async def capture_order(self, token: str) -> Any:
        return await self._request("POST", f"/v2/checkout/orders/{token}/capture")


def from_config(transport: Optional[httpx.AsyncBaseTransport] = None) -> PayPalClient:
    """Client PayPal construit depuis storefront.config (sandbox sauf PAYPAL_ENV=live)."""
    return PayPalClient(
        config.PAYPAL_CLIENT_ID,
        config.PAYPAL_CLIENT_SECRET,
        config.PAYPAL_BASE_URL,
        timeout=config.PAYPAL_TIMEOUT_SECONDS,
        transport=transport,
    )
