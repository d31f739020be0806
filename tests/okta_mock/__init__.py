"""Okta API Mock for Testing.

In-memory implementation of the identity provider API surface used by the
lifecycle controller, so lifecycle, reconcile and CLI tests run without
network access.

Key Features:
- In-memory IdP store with platform-assigned ids and default status
- Call log for asserting the exact sequence of remote calls
- Error injection per operation
- Response shaping: omit fields and reorder sets like a real API might

Usage:
    from okta_mock import MockIdpClient

    client = MockIdpClient(next_ids=["0oa1b2c3"])
    resource = SamlIdpResource(client)
    resource.create(spec)

    assert client.call_names() == ["create_idp", "get_idp"]
"""

from .client import MockIdpClient, not_found

__all__ = [
    "MockIdpClient",
    "not_found",
]
