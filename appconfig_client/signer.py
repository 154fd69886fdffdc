"""
Request signing for Azure App Configuration.

This module builds the canonical string-to-sign for a key-value listing
request, signs it with HMAC-SHA256 and assembles the headers the service
needs to authenticate the caller. It also provides the matching server-side
check used to verify a prepared request.
"""

import base64
import binascii
import datetime
import hashlib
import hmac
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

import requests

from .constants import (
    DATE_FORMAT,
    DEFAULT_KEY_INTERVAL,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_SHA256,
    HEADER_DATE,
    HTTP_METHOD,
    HTTPS_PREFIX,
    KV_PATH,
    SIGNED_HEADERS,
    SIGNING_ALGORITHM,
)
from .exceptions import (
    InternalError,
    InvalidEndpointError,
    InvalidSecretError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestDescriptor:
    """
    A fully signed request, ready to be sent by an HTTP transport.

    Headers are stored as a read-only mapping.
    """

    method: str
    url: str
    headers: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    def to_prepared_request(self) -> requests.PreparedRequest:
        """Convert to a requests.PreparedRequest for Session.send()."""
        return requests.Request(
            self.method,
            self.url,
            headers=dict(self.headers)
        ).prepare()


def _check_url(url: str):
    """Reject URLs that requests refuses to prepare or would send altered."""
    try:
        prepared = requests.Request(HTTP_METHOD, url).prepare()
    except requests.RequestException as e:
        raise InvalidEndpointError(f"Invalid URL {url!r}: {e}") from e

    # The signed host and path must be exactly what goes on the wire
    if prepared.url != url:
        raise InvalidEndpointError(
            f"Invalid URL {url!r}: would be sent as {prepared.url!r}"
        )


def format_date(moment: datetime.datetime) -> str:
    """
    Format a moment as an ISO-8601 UTC timestamp.

    Naive datetimes are taken to be UTC already.

    Raises:
        InternalError: If the datetime cannot be formatted
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    try:
        return moment.astimezone(datetime.timezone.utc).strftime(DATE_FORMAT)
    except (ValueError, OverflowError) as e:
        raise InternalError(f"Could not format date: {e}") from e


def content_sha256(body: bytes = b"") -> str:
    """Return the base64-encoded SHA-256 digest of the request body."""
    return base64.b64encode(hashlib.sha256(body).digest()).decode('ascii')


def build_string_to_sign(path: str, date: str, host: str, content_hash: str) -> str:
    """
    Build the canonical string-to-sign.

    Format: METHOD\\nPATH\\nDATE;HOST;CONTENT_HASH (no trailing newline)
    """
    return f"{HTTP_METHOD}\n{path}\n{date};{host};{content_hash}"


def _encode(string_to_sign: str) -> bytes:
    """Encode the string-to-sign as UTF-8."""
    try:
        return string_to_sign.encode('utf-8')
    except UnicodeEncodeError as e:
        raise InternalError(f"Could not encode string to sign: {e}") from e


def decode_secret(secret: str) -> bytes:
    """
    Decode a base64 access key into raw key bytes.

    Raises:
        InvalidSecretError: If the secret is not valid base64
    """
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretError("secret could not be decoded as base64") from e


def compute_signature(string_to_sign: bytes, key: bytes) -> str:
    """Return the base64-encoded HMAC-SHA256 of string_to_sign."""
    mac = hmac.new(key, string_to_sign, hashlib.sha256)
    return base64.b64encode(mac.digest()).decode('ascii')


def build_authorization(credential: str, signature: str) -> str:
    """Build the Authorization header value."""
    return (
        f"{SIGNING_ALGORITHM} Credential={credential}"
        f"&SignedHeaders={SIGNED_HEADERS}"
        f"&Signature={signature}"
    )


def prepare_request(endpoint: str, secret: str, credential: str,
                    now: Optional[datetime.datetime] = None) -> RequestDescriptor:
    """
    Prepare a signed key-value listing request.

    Args:
        endpoint: The App Configuration endpoint, e.g. https://name.azconfig.io
        secret: The base64-encoded access key secret
        credential: The access key ID, passed through verbatim
        now: Timestamp to sign with instead of the current time

    Returns:
        A RequestDescriptor carrying Date, x-ms-content-sha256 and
        Authorization headers

    Raises:
        InvalidEndpointError: If the endpoint is not https or the URL is invalid
        InvalidSecretError: If the secret is not valid base64
        InternalError: If the date or string-to-sign cannot be encoded
    """
    url = f"{endpoint}{KV_PATH}"
    if not endpoint.startswith(HTTPS_PREFIX):
        raise InvalidEndpointError(f"endpoint must start with {HTTPS_PREFIX}")
    _check_url(url)

    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    date_string = format_date(now)

    # The body is always empty
    content_hash = content_sha256()

    host = endpoint.replace(HTTPS_PREFIX, "")
    path = url.replace(endpoint, "")

    string_to_sign = _encode(
        build_string_to_sign(path, date_string, host, content_hash)
    )
    key = decode_secret(secret)
    signature = compute_signature(string_to_sign, key)

    logger.debug("Prepared signed %s request for host %s", HTTP_METHOD, host)

    return RequestDescriptor(
        method=HTTP_METHOD,
        url=url,
        headers={
            HEADER_DATE: date_string,
            HEADER_CONTENT_SHA256: content_hash,
            HEADER_AUTHORIZATION: build_authorization(credential, signature),
        }
    )


def _parse_signature(authorization: str) -> Optional[str]:
    """Extract the signature from an Authorization value, or None."""
    head, sep, signature = authorization.rpartition("&Signature=")
    if not sep or not signature:
        return None
    if not head.startswith(f"{SIGNING_ALGORITHM} Credential="):
        return None
    if not head.endswith(f"&SignedHeaders={SIGNED_HEADERS}"):
        return None
    return signature


def _verify_date(date_string: str, key_interval: int,
                 now: Optional[datetime.datetime]) -> bool:
    """Check that the Date header lies within key_interval of now."""
    try:
        signed_at = datetime.datetime.strptime(date_string, DATE_FORMAT)
    except (ValueError, TypeError):
        return False
    signed_at = signed_at.replace(tzinfo=datetime.timezone.utc)

    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)

    diff = abs((now - signed_at).total_seconds())
    return diff <= key_interval


def verify_request(descriptor: RequestDescriptor, secret: str,
                   key_interval: int = DEFAULT_KEY_INTERVAL,
                   now: Optional[datetime.datetime] = None) -> bool:
    """
    Verify the signature of a prepared request, as the service would.

    Args:
        descriptor: The request to verify
        secret: The base64-encoded access key secret
        key_interval: Allowed clock skew of the Date header, in seconds
        now: Reference time instead of the current time

    Returns:
        True if the headers are present, the date is within tolerance,
        the body hash matches an empty body and the signature is valid

    Raises:
        InvalidSecretError: If the secret is not valid base64
    """
    key = decode_secret(secret)

    headers = descriptor.headers
    missing = [
        name for name in (HEADER_DATE, HEADER_CONTENT_SHA256, HEADER_AUTHORIZATION)
        if name not in headers
    ]
    if missing:
        logger.debug("Request is missing headers: %s", ", ".join(missing))
        return False

    date_string = headers[HEADER_DATE]
    if not _verify_date(date_string, key_interval, now):
        logger.debug("Date header %r is outside the allowed window", date_string)
        return False

    content_hash = headers[HEADER_CONTENT_SHA256]
    if not hmac.compare_digest(content_hash.encode('utf-8'), content_sha256().encode('ascii')):
        logger.debug("Content hash does not match an empty body")
        return False

    url = descriptor.url
    if not url.startswith(HTTPS_PREFIX) or not url.endswith(KV_PATH):
        logger.debug("Unexpected request URL %s", url)
        return False

    signature = _parse_signature(headers[HEADER_AUTHORIZATION])
    if signature is None:
        logger.debug("Authorization header is malformed")
        return False

    endpoint = url[:-len(KV_PATH)]
    host = endpoint.replace(HTTPS_PREFIX, "")
    path = url.replace(endpoint, "")
    expected = compute_signature(
        _encode(build_string_to_sign(path, date_string, host, content_hash)),
        key
    )

    # Use constant-time comparison
    return hmac.compare_digest(expected.encode('ascii'), signature.encode('utf-8'))
