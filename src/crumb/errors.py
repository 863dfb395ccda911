"""Crumb exception hierarchy.

Shared across the validator, keyring, encoder, and jar so every module
raises and callers catch the same types.
"""


class CrumbError(Exception):
    """Base for all crumb-specific errors."""


class ConfigurationError(CrumbError):
    """Raised when jar or keyring configuration is invalid.

    Typically raised while building a ``JarConfig`` or ``Keyring``.
    """


class ValidationError(CrumbError):
    """A cookie name, value, or attribute failed its grammar check.

    Raised before any store mutation or header emission, so the failing
    call has no observable effect. Maps naturally to a 400 response.
    """

    status = 400

    def __init__(self, field: str, detail: str = "") -> None:
        self.field = field
        self.detail = detail or f"{field} is invalid"
        super().__init__(self.detail)

    def __str__(self) -> str:
        return self.detail


class PolicyError(CrumbError):
    """A cookie operation is not permitted by the jar's policy.

    Secure cookies over an insecure connection, or signing with no keys
    configured. These are programming errors, not client errors.
    """

    status = 500

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
