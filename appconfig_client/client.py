"""
App Configuration client library.

This module ties the request signer and response decoder to one set of
access key settings, so surrounding code can prepare, verify and decode
without passing the endpoint and secret around.
"""

import datetime
from typing import Dict, Optional

from .constants import DEFAULT_CONFIG
from .decoder import decode_response
from .exceptions import ConfigurationError
from .signer import RequestDescriptor, prepare_request, verify_request


class AppConfigClient:
    """
    Client for preparing authenticated Azure App Configuration requests.

    The client never sends requests itself: prepare() returns a descriptor
    for an HTTP transport to execute, and decode() turns the response
    body into a dictionary.
    """

    def __init__(self, endpoint: str, secret: str, credential: str, **config):
        """
        Initialize App Configuration client.

        Endpoint and secret are checked when a request is prepared.

        Args:
            endpoint: App Configuration endpoint (https://...)
            secret: Base64-encoded access key secret
            credential: Access key ID
            **config: Configuration options (key_interval)
        """
        self.endpoint = endpoint
        self.secret = secret
        self.credential = credential

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

    def _validate_config(self):
        """Validate client configuration."""
        unknown = set(self.config) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigurationError(f"unknown config options: {', '.join(sorted(unknown))}")

        if self.config['key_interval'] <= 0:
            raise ConfigurationError("key_interval must be positive")

    def prepare(self, now: Optional[datetime.datetime] = None) -> RequestDescriptor:
        """Prepare a signed key-value listing request."""
        return prepare_request(self.endpoint, self.secret, self.credential, now=now)

    def verify(self, descriptor: RequestDescriptor,
               now: Optional[datetime.datetime] = None) -> bool:
        """Verify a request signed with this client's secret."""
        return verify_request(
            descriptor,
            self.secret,
            key_interval=self.config['key_interval'],
            now=now
        )

    def decode(self, data: bytes) -> Dict[str, str]:
        """Decode a key-value list response body."""
        return decode_response(data)

    def __repr__(self):
        return f"AppConfigClient(endpoint={self.endpoint!r}, credential={self.credential!r})"
