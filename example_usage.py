#!/usr/bin/env python3
"""
Basic usage example for the App Configuration client library.

Fill in the endpoint, secret and credential with an access key from the
Azure App Configuration "Access keys" blade, then run this script to list
the store's key-values.
"""

import datetime
import logging
import sys

import requests

from appconfig_client import AppConfigClient, AppConfigError


def main():
    """Run basic usage example."""

    # Access key settings
    endpoint = "https://your-store.azconfig.io"
    credential = "your-access-key-id"
    secret = "c2VjcmV0LWtleQ=="

    logging.basicConfig(level=logging.DEBUG)

    print("=== App Configuration Client Basic Usage Example ===\n")

    print("1. Creating client...")
    client = AppConfigClient(endpoint, secret, credential)
    print(f"   Client created for: {endpoint}")
    print(f"   Credential: {credential}\n")

    try:
        print("2. Preparing a signed request...")
        request = client.prepare()
        print(f"   {request.method} {request.url}")
        for name, value in request.headers.items():
            print(f"   {name}: {value}")
        print()

        print("3. Verifying the signature locally...")
        print(f"   Valid now: {client.verify(request)}")
        later = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=10)
        print(f"   Valid in 10 minutes: {client.verify(request, now=later)}\n")

        print("4. Sending the request...")
        with requests.Session() as session:
            response = session.send(request.to_prepared_request(), timeout=30)
        print(f"   Status: {response.status_code}\n")
        response.raise_for_status()

        print("5. Decoding the response...")
        for key, value in sorted(client.decode(response.content).items()):
            print(f"   {key} = {value}")

    except AppConfigError as e:
        print(f"   ✗ Client error: {e}")
        return 1
    except requests.RequestException as e:
        print(f"   ✗ HTTP request failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
