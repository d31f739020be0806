"""Shared constants for SAML identity provider mapping.

Every enumerated value and default used by the config mapper lives here so
that build and sync never carry string literals of their own.
"""

from __future__ import annotations

from enum import Enum

# Type tag for the SAML 2.0 variant of an identity provider. Used on both the
# root object and its protocol; never user-editable.
SAML2_TYPE = "SAML2"

# Binding aliases accepted by the remote API
POST_BINDING = "HTTP-POST"
REDIRECT_BINDING = "HTTP-REDIRECT"

UNSPECIFIED_NAME_FORMAT = "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"
DEFAULT_USERNAME_TEMPLATE = "idpuser.subjectNameId"
DEFAULT_SIGNATURE_ALGORITHM = "SHA-256"


class IdpStatus(str, Enum):
    """Activation status of an identity provider."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Binding(str, Enum):
    """SAML HTTP bindings."""

    POST = POST_BINDING
    REDIRECT = REDIRECT_BINDING


class AcsType(str, Enum):
    """Assertion consumer service endpoint types."""

    INSTANCE = "INSTANCE"


class IssuerMode(str, Enum):
    """Which issuer the platform stamps on tokens for this IdP."""

    ORG_URL = "ORG_URL"
    CUSTOM_URL = "CUSTOM_URL"
    DYNAMIC = "DYNAMIC"


class ProvisioningAction(str, Enum):
    """What happens to a user on first sign-in through the IdP."""

    AUTO = "AUTO"
    CALLOUT = "CALLOUT"
    DISABLED = "DISABLED"


class LifecycleAction(str, Enum):
    """Action for deprovisioned and suspended users."""

    NONE = "NONE"
    REACTIVATE = "REACTIVATE"
    UNSUSPEND = "UNSUSPEND"


class GroupsAction(str, Enum):
    """Group membership sync action."""

    NONE = "NONE"
    APPEND = "APPEND"
    SYNC = "SYNC"
    ASSIGN = "ASSIGN"


class SubjectMatchType(str, Enum):
    """How an IdP subject is matched to a local user."""

    USERNAME = "USERNAME"
    EMAIL = "EMAIL"
    USERNAME_OR_EMAIL = "USERNAME_OR_EMAIL"
    CUSTOM_ATTRIBUTE = "CUSTOM_ATTRIBUTE"


class AccountLinkAction(str, Enum):
    """Account linking action."""

    AUTO = "AUTO"
    DISABLED = "DISABLED"


class SignatureAlgorithm(str, Enum):
    """Signature/digest algorithms for SAML messages."""

    SHA_1 = "SHA-1"
    SHA_256 = DEFAULT_SIGNATURE_ALGORITHM


class RequestSignatureScope(str, Enum):
    """Which outgoing SAML messages are signed."""

    REQUEST = "REQUEST"
    NONE = "NONE"


class ResponseSignatureScope(str, Enum):
    """Which incoming SAML elements must be signed."""

    RESPONSE = "RESPONSE"
    ASSERTION = "ASSERTION"
    ANY = "ANY"
