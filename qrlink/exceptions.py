"""Exceptions raised by the QR link service.

Classes:
    QRLinkError:
        Base class for every error raised by this package.

    ValidationError:
        Client-side input problem. Also a ``ValueError`` so callers can
        handle it the same way as other bad-value errors.

    UnsupportedTypeError:
        Raised when a QR payload type is not one of url/text/wifi/email.

    EmptyPayloadError:
        Raised when the string to encode ends up empty.

    InvalidExpirationError:
        Raised when an expiration value cannot be parsed into an instant.

    ExpirationInPastError:
        Raised when an expiration is at or before the current instant.

    DuplicateShortIdError:
        Raised by a link store when the short ID unique constraint is violated.

    ShortIdExhaustedError:
        Raised when no free short ID was found within the retry budget.

    StoreError:
        Raised when the storage engine fails (connection issues, timeouts...).
"""


class QRLinkError(Exception):
    """Generic base class for QR link service exceptions."""

    pass


class ValidationError(QRLinkError, ValueError):
    """Exception raised when client input is missing or malformed."""

    pass


class UnsupportedTypeError(ValidationError):
    """Exception raised for an unknown QR payload type."""

    pass


class EmptyPayloadError(ValidationError):
    """Exception raised when the resulting QR payload is empty."""

    pass


class InvalidExpirationError(ValidationError):
    """Exception raised when an expiration value is not a valid timestamp."""

    pass


class ExpirationInPastError(ValidationError):
    """Exception raised when an expiration is not strictly in the future."""

    pass


class DuplicateShortIdError(QRLinkError):
    """Exception raised when inserting a link whose short ID already exists."""

    pass


class ShortIdExhaustedError(QRLinkError):
    """Exception raised when every short ID attempt collided."""

    pass


class StoreError(QRLinkError):
    """Exception raised when there is an error in the link store."""

    pass
