"""
Taxonomie des erreurs métier.
- CheckoutValidationError: requête invalide (faute du client), 400, aucun effet de bord.
- DeliveryError: échec du transport e-mail.
- GatewayError: passerelle de paiement injoignable ou en échec.
- StorageError: lecture/écriture du registre des transactions impossible.
Les handlers (storefront.app_setup.exceptions) les rendent en JSON {"error": ...}.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CheckoutValidationError(StorefrontError):
    status_code = 400


class DeliveryError(StorefrontError):
    pass


class GatewayError(StorefrontError):
    pass


class StorageError(StorefrontError):
    pass
