"""
App Configuration Client Library

A Python client library that prepares HMAC-signed requests for the Azure
App Configuration key-value service and decodes its responses.

Example usage:
    import requests
    from appconfig_client import AppConfigClient

    client = AppConfigClient("https://name.azconfig.io", "c2VjcmV0", "key-id")
    request = client.prepare()
    with requests.Session() as session:
        response = session.send(request.to_prepared_request())
    settings = client.decode(response.content)
"""

from .client import AppConfigClient
from .decoder import ConfigEntry, decode_entries, decode_response
from .exceptions import (
    AppConfigError,
    InvalidEndpointError,
    InvalidSecretError,
    InternalError,
    MalformedResponseError,
    ConfigurationError
)
from .constants import (
    HEADER_DATE,
    HEADER_CONTENT_SHA256,
    HEADER_AUTHORIZATION,
    KV_PATH,
    DEFAULT_CONFIG,
    DEFAULT_KEY_INTERVAL
)
from .signer import RequestDescriptor, prepare_request, verify_request

__version__ = "1.0.0"
__all__ = [
    "AppConfigClient",
    "RequestDescriptor",
    "ConfigEntry",
    "prepare_request",
    "verify_request",
    "decode_entries",
    "decode_response",
    "AppConfigError",
    "InvalidEndpointError",
    "InvalidSecretError",
    "InternalError",
    "MalformedResponseError",
    "ConfigurationError",
    "HEADER_DATE",
    "HEADER_CONTENT_SHA256",
    "HEADER_AUTHORIZATION",
    "KV_PATH",
    "DEFAULT_CONFIG",
    "DEFAULT_KEY_INTERVAL"
]
