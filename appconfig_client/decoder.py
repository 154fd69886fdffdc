"""
Decoding of App Configuration key-value list responses.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, List

from .exceptions import MalformedResponseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigEntry:
    """A single key/value pair as returned by the service."""

    key: str
    value: str


def _parse_entry(index: int, item) -> ConfigEntry:
    """Validate one item of the items array."""
    if not isinstance(item, dict):
        raise MalformedResponseError(f"items[{index}] is not an object")

    for field in ('key', 'value'):
        if not isinstance(item.get(field), str):
            raise MalformedResponseError(f"items[{index}].{field} is missing or not a string")

    # etag, label, content_type, tags, locked, last_modified are ignored
    return ConfigEntry(key=item['key'], value=item['value'])


def decode_entries(data: bytes) -> List[ConfigEntry]:
    """
    Decode a response body into its ordered list of entries.

    Raises:
        MalformedResponseError: If data is not JSON or not an items envelope
    """
    try:
        envelope = json.loads(data)
    except ValueError as e:
        raise MalformedResponseError(f"response is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise MalformedResponseError("response is not a JSON object")

    items = envelope.get('items')
    if not isinstance(items, list):
        raise MalformedResponseError("response has no items array")

    return [_parse_entry(index, item) for index, item in enumerate(items)]


def decode_response(data: bytes) -> Dict[str, str]:
    """
    Decode a response body into a key/value dictionary.

    Later entries overwrite earlier ones with the same key.

    Args:
        data: The raw body returned by the service

    Returns:
        Dictionary of configuration keys to values

    Raises:
        MalformedResponseError: If data is not JSON or not an items envelope
    """
    entries = decode_entries(data)
    config = {entry.key: entry.value for entry in entries}
    logger.debug("Decoded %d entries into %d keys", len(entries), len(config))
    return config
