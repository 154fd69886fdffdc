"""
Integration tests: prepared requests sent through requests to an
in-process stand-in for the App Configuration service.
"""

import io
import json

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from appconfig_client import (
    AppConfigClient,
    MalformedResponseError,
    RequestDescriptor,
    verify_request
)
from appconfig_client.constants import (
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_SHA256,
    HEADER_DATE
)


class FakeAppConfigAdapter(BaseAdapter):
    """Transport adapter that answers like the key-value endpoint."""

    def __init__(self, secret, items, body=None):
        super().__init__()
        self.secret = secret
        self.items = items
        self.body = body
        self.requests = []

    def send(self, request, **kwargs):
        self.requests.append(request)

        headers = {
            name: request.headers[name]
            for name in (HEADER_DATE, HEADER_CONTENT_SHA256, HEADER_AUTHORIZATION)
            if name in request.headers
        }
        descriptor = RequestDescriptor(request.method, request.url, headers)

        if verify_request(descriptor, self.secret):
            status, body = 200, self.body
            if body is None:
                body = json.dumps({"items": self.items}).encode('utf-8')
        else:
            status, body = 401, b'{"error": "unauthorized"}'

        response = requests.Response()
        response.status_code = status
        response.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
        response.raw = io.BytesIO(body)
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class TestIntegration:
    """Round trips through a requests.Session."""
    ENDPOINT = "https://example.azconfig.io"
    CREDENTIAL = "example-id"
    SECRET = "c2VjcmV0LWtleQ=="

    ITEMS = [
        {
            "etag": "JPyzoVkUx8F4ighi4WDdmP9gFT5",
            "key": "feature.enabled",
            "label": None,
            "content_type": "",
            "value": "true",
            "tags": {},
            "locked": False,
            "last_modified": "2022-01-11T16:42:45+00:00"
        },
        {"key": "color", "value": "blue"},
        {"key": "color", "value": "green"},
    ]

    @pytest.fixture
    def client(self):
        """Create client for the fake service."""
        return AppConfigClient(self.ENDPOINT, self.SECRET, self.CREDENTIAL)

    def session_for(self, adapter):
        session = requests.Session()
        session.mount(self.ENDPOINT, adapter)
        return session

    def test_round_trip(self, client):
        """Test that a prepared request is accepted and the reply decoded."""
        adapter = FakeAppConfigAdapter(self.SECRET, self.ITEMS)

        with self.session_for(adapter) as session:
            response = session.send(client.prepare().to_prepared_request())

        assert response.status_code == 200
        assert client.decode(response.content) == {
            "feature.enabled": "true",
            "color": "green"
        }

        sent = adapter.requests[0]
        assert sent.method == "GET"
        assert sent.url == "https://example.azconfig.io/kv?api-version=1"
        assert sent.headers[HEADER_AUTHORIZATION].startswith(
            "HMAC-SHA256 Credential=example-id&SignedHeaders=date;host;x-ms-content-sha256&Signature="
        )

    def test_wrong_secret_rejected(self):
        """Test that a request signed with another key is refused."""
        adapter = FakeAppConfigAdapter(self.SECRET, self.ITEMS)
        wrong_client = AppConfigClient(self.ENDPOINT, "d3Jvbmc=", self.CREDENTIAL)

        with self.session_for(adapter) as session:
            response = session.send(wrong_client.prepare().to_prepared_request())

        assert response.status_code == 401

    def test_empty_store(self, client):
        """Test a store with no keys."""
        adapter = FakeAppConfigAdapter(self.SECRET, [])

        with self.session_for(adapter) as session:
            response = session.send(client.prepare().to_prepared_request())

        assert client.decode(response.content) == {}

    def test_garbled_reply(self, client):
        """Test that a broken reply surfaces as MalformedResponseError."""
        adapter = FakeAppConfigAdapter(self.SECRET, [], body=b"<html>gateway error</html>")

        with self.session_for(adapter) as session:
            response = session.send(client.prepare().to_prepared_request())

        with pytest.raises(MalformedResponseError):
            client.decode(response.content)
