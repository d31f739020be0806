"""Pydantic domain model of a remote SAML identity provider.

The models mirror the nested JSON the identity platform accepts and returns.
Field aliases carry the remote camelCase names; Python code uses snake_case.

Every optional field doubles as a presence marker: ``None`` means the remote
response omitted the field, which the config mapper treats as "leave the
local value alone" rather than "clear it".
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_serializer

from .constants import SAML2_TYPE


class _RemoteModel(BaseModel):
    """Base for all remote sub-objects: immutable, tolerant of unknown keys."""

    model_config = {"extra": "ignore", "frozen": True, "populate_by_name": True}


# =============================================================================
# Policy
# =============================================================================


class ConditionAction(_RemoteModel):
    """Action taken when a lifecycle condition applies."""

    action: str | None = None


class ProvisioningConditions(_RemoteModel):
    """Deprovisioned and suspended lifecycle actions."""

    deprovisioned: ConditionAction | None = None
    suspended: ConditionAction | None = None


class ProvisioningGroups(_RemoteModel):
    """Group sync settings applied during provisioning."""

    action: str | None = None
    source_attribute_name: str | None = Field(None, alias="sourceAttributeName")
    assignments: frozenset[str] | None = None
    filter: frozenset[str] | None = None

    @field_serializer("assignments", "filter")
    def _sorted(self, value: frozenset[str] | None) -> list[str] | None:
        return sorted(value) if value is not None else None


class Provisioning(_RemoteModel):
    """Just-in-time provisioning policy."""

    action: str | None = None
    profile_master: bool | None = Field(None, alias="profileMaster")
    conditions: ProvisioningConditions | None = None
    groups: ProvisioningGroups | None = None


class UserNameTemplate(_RemoteModel):
    template: str | None = None


class SamlSubject(_RemoteModel):
    """How the asserted subject is matched to a local user.

    ``formats`` is a set: order carries no meaning and duplicates collapse.
    It is serialized sorted so payloads are deterministic.
    """

    match_type: str | None = Field(None, alias="matchType")
    match_attribute: str | None = Field(None, alias="matchAttribute")
    filter: str | None = None
    formats: frozenset[str] | None = Field(None, alias="format")
    user_name_template: UserNameTemplate | None = Field(None, alias="userNameTemplate")

    @field_serializer("formats")
    def _sorted_formats(self, value: frozenset[str] | None) -> list[str] | None:
        return sorted(value) if value is not None else None


class GroupInclusion(_RemoteModel):
    include: frozenset[str] = Field(default_factory=frozenset)

    @field_serializer("include")
    def _sorted_include(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class AccountLinkFilter(_RemoteModel):
    groups: GroupInclusion | None = None


class AccountLink(_RemoteModel):
    """Account linking policy. Only present when an action is declared."""

    action: str | None = None
    filter: AccountLinkFilter | None = None


class SamlPolicy(_RemoteModel):
    provisioning: Provisioning | None = None
    subject: SamlSubject | None = None
    account_link: AccountLink | None = Field(None, alias="accountLink")
    max_clock_skew: int | None = Field(None, alias="maxClockSkew")


# =============================================================================
# Protocol
# =============================================================================


class Signature(_RemoteModel):
    algorithm: str | None = None
    scope: str | None = None


class SignatureSettings(_RemoteModel):
    signature: Signature | None = None


class Algorithms(_RemoteModel):
    """Request and response signature settings."""

    request: SignatureSettings | None = None
    response: SignatureSettings | None = None


class AcsEndpoint(_RemoteModel):
    binding: str | None = None
    type: str | None = None


class SsoEndpoint(_RemoteModel):
    binding: str | None = None
    destination: str | None = None
    url: str | None = None


class SamlEndpoints(_RemoteModel):
    acs: AcsEndpoint | None = None
    sso: SsoEndpoint | None = None


class Trust(_RemoteModel):
    """Trust anchors for assertions. Opaque to this package."""

    issuer: str | None = None
    audience: str | None = None
    kid: str | None = None


class SamlCredentials(_RemoteModel):
    trust: Trust | None = None


class ProtocolSettings(_RemoteModel):
    name_format: str | None = Field(None, alias="nameFormat")


class SamlProtocol(_RemoteModel):
    type: Literal["SAML2"] = SAML2_TYPE
    algorithms: Algorithms | None = None
    endpoints: SamlEndpoints | None = None
    credentials: SamlCredentials | None = None
    settings: ProtocolSettings | None = None


# =============================================================================
# Root
# =============================================================================


class SamlIdentityProvider(_RemoteModel):
    """A SAML 2.0 identity provider as stored by the remote platform.

    ``id`` is assigned by the platform on create. ``status`` is owned by the
    lifecycle endpoints and is never submitted with the object itself.
    """

    id: str | None = None
    name: str | None = None
    type: Literal["SAML2"] = SAML2_TYPE
    issuer_mode: str | None = Field(None, alias="issuerMode")
    status: str | None = None
    policy: SamlPolicy | None = None
    protocol: SamlProtocol | None = None

    @classmethod
    def from_remote(cls, data: dict[str, Any]) -> SamlIdentityProvider:
        """Parse a remote API response body."""
        return cls.model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body submitted on create and update."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"id", "status"},
        )
