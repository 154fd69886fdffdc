"""
Constants for the App Configuration client library.
Compatible with the Azure App Configuration HMAC authentication scheme.
"""

# HTTP Headers required by the service on every request
HEADER_DATE = "Date"
HEADER_CONTENT_SHA256 = "x-ms-content-sha256"
HEADER_AUTHORIZATION = "Authorization"

# Request shape
HTTP_METHOD = "GET"
HTTPS_PREFIX = "https://"
KV_PATH = "/kv?api-version=1"

# Authorization header parts
SIGNING_ALGORITHM = "HMAC-SHA256"
SIGNED_HEADERS = "date;host;x-ms-content-sha256"

# ISO-8601 UTC, second precision ("2022-01-11T16:42:45Z")
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Date header tolerance
DEFAULT_KEY_INTERVAL = 5 * 60       # 5 minutes in seconds

# Default configuration values
DEFAULT_CONFIG = {
    'key_interval': DEFAULT_KEY_INTERVAL,
}
