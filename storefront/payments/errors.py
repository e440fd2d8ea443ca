"""
Erreurs des providers de paiement.
- ProviderError: échec amont (statut + corps du provider transmis tels quels à l'appelant).
- PayPalError: ProviderError émise par l'API PayPal.
- PayPalConfigError: identifiants PayPal manquants (erreur de configuration, 500).
"""
from typing import Any


class ProviderError(Exception):
    def __init__(self, status_code: int, body: Any, provider: str):
        super().__init__(f"{provider} error {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.provider = provider


class PayPalError(ProviderError):
    def __init__(self, status_code: int, body: Any):
        super().__init__(status_code=status_code, body=body, provider="paypal")


class PayPalConfigError(PayPalError):
    def __init__(self, message: str = "Missing PayPal credentials"):
        super().__init__(status_code=500, body=message)
