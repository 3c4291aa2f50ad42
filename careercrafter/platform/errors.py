"""Error taxonomy shared by the matching and chat components.

Components raise these; ``main.py`` maps them to HTTP responses. Provider
failures never leave the provider chain, and access denial is a normal
decision outcome rather than an exception.
"""


class CareerCrafterError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(CareerCrafterError):
    status_code = 400


class NotFoundError(CareerCrafterError):
    status_code = 404


class PersistenceError(CareerCrafterError):
    status_code = 500


class ProviderError(CareerCrafterError):
    """Raised inside a matching/chat provider; absorbed by its caller."""

    def __init__(self, provider: str, detail: str):
        super().__init__(detail)
        self.provider = provider
