"""
Custom exceptions for the App Configuration client library.
"""


class AppConfigError(Exception):
    """Base exception for App Configuration client errors."""
    pass


class InvalidEndpointError(AppConfigError):
    """Raised when the endpoint is not an https URL or does not parse."""
    pass


class InvalidSecretError(AppConfigError):
    """Raised when the secret cannot be decoded as base64."""
    pass


class InternalError(AppConfigError):
    """
    Raised when date formatting or UTF-8 encoding fails.

    These should never occur with sane input; they point at a broken
    host environment rather than a caller mistake.
    """
    pass


class MalformedResponseError(AppConfigError):
    """Raised when response bytes are not the expected JSON envelope."""
    pass


class ConfigurationError(AppConfigError):
    """Raised when client configuration is invalid."""
    pass
