"""Delivery integration exceptions."""


class DeliveryError(Exception):
    """Base exception for delivery integration errors."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.message = message
        self.provider = provider
        super().__init__(message)


class DeliveryAuthError(DeliveryError):
    """Credentials missing or rejected by the delivery provider."""


class DeliveryAPIError(DeliveryError):
    """API request to the delivery provider failed."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        response_body: object | None = None,
    ) -> None:
        super().__init__(message, provider)
        self.status_code = status_code
        self.response_body = response_body


class DeliveryValidationError(DeliveryAPIError):
    """Provider rejected the delivery parameters (HTTP 422)."""

    @property
    def field_errors(self) -> list[dict[str, str]]:
        if isinstance(self.response_body, dict):
            errors = self.response_body.get("field_errors")
            if isinstance(errors, list):
                return errors
        return []


class InvalidPhoneNumber(DeliveryError):
    """Phone number cannot be converted to E.164."""
