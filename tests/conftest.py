"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Any

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add tests to path for okta_mock imports
tests_path = Path(__file__).parent
sys.path.insert(0, str(tests_path))

from okta_mock import MockIdpClient  # noqa: E402

from samlidp.lifecycle import SamlIdpResource  # noqa: E402
from samlidp.schema import SamlIdpSpec  # noqa: E402


@pytest.fixture
def minimal_spec_data() -> dict[str, Any]:
    """Smallest valid spec: required fields only."""
    return {
        "name": "Example IdP",
        "acs_binding": "HTTP-POST",
        "acs_url": "https://sp.example.com/acs",
        "sso_url": "https://idp.example.com/sso",
        "issuer": "urn:example:idp",
        "audience": "urn:example:sp",
        "kid": "key-1",
    }


@pytest.fixture
def spec(minimal_spec_data: dict[str, Any]) -> SamlIdpSpec:
    return SamlIdpSpec.model_validate(minimal_spec_data)


@pytest.fixture
def full_spec(minimal_spec_data: dict[str, Any]) -> SamlIdpSpec:
    """Spec exercising every optional field."""
    return SamlIdpSpec.model_validate(
        {
            **minimal_spec_data,
            "status": "INACTIVE",
            "issuer_mode": "CUSTOM_URL",
            "sso_binding": "HTTP-REDIRECT",
            "sso_destination": "https://idp.example.com/dest",
            "name_format": "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress",
            "subject_format": [
                "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress",
                "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified",
            ],
            "subject_filter": "(\\S+@example\\.com)",
            "subject_match_type": "CUSTOM_ATTRIBUTE",
            "subject_match_attribute": "customId",
            "username_template": "idpuser.email",
            "provisioning_action": "AUTO",
            "deprovisioned_action": "REACTIVATE",
            "suspended_action": "UNSUSPEND",
            "profile_master": True,
            "groups_action": "ASSIGN",
            "groups_attribute": "groups",
            "groups_assignment": ["00g2", "00g1"],
            "groups_filter": ["00g3"],
            "account_link_action": "AUTO",
            "account_link_group_include": ["00g9", "00g8"],
            "request_signature_algorithm": "SHA-1",
            "request_signature_scope": "NONE",
            "response_signature_algorithm": "SHA-1",
            "response_signature_scope": "RESPONSE",
            "max_clock_skew": 120000,
        }
    )


@pytest.fixture
def mock_client() -> MockIdpClient:
    return MockIdpClient(next_ids=["0oa1b2c3"])


@pytest.fixture
def resource(mock_client: MockIdpClient) -> SamlIdpResource:
    return SamlIdpResource(mock_client)
