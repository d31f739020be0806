"""Flat configuration schema for a SAML identity provider.

A ``SamlIdpSpec`` is what users write: one mapping of snake_case keys.
Validation happens here at the boundary, so the config mapper can assume
every enum value and required field is already in shape.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .constants import (
    DEFAULT_USERNAME_TEMPLATE,
    UNSPECIFIED_NAME_FORMAT,
    AccountLinkAction,
    AcsType,
    Binding,
    GroupsAction,
    IdpStatus,
    IssuerMode,
    LifecycleAction,
    ProvisioningAction,
    RequestSignatureScope,
    ResponseSignatureScope,
    SignatureAlgorithm,
    SubjectMatchType,
)

# Fields holding unordered collections. Compared as sets everywhere.
SET_FIELDS: frozenset[str] = frozenset(
    {
        "subject_format",
        "groups_assignment",
        "groups_filter",
        "account_link_group_include",
    }
)

# Validation context for specs populated from remote data
FROM_REMOTE: dict[str, bool] = {"from_remote": True}


class SamlIdpSpec(BaseModel):
    """Declared configuration of one SAML 2.0 identity provider."""

    model_config = {"extra": "ignore", "frozen": True}

    # Identity
    name: Annotated[str, Field(min_length=1, max_length=100)]
    status: IdpStatus = IdpStatus.ACTIVE
    issuer_mode: IssuerMode = IssuerMode.ORG_URL

    # Endpoints
    acs_binding: Binding
    acs_type: AcsType = AcsType.INSTANCE
    # Required when authored; the remote never echoes it, so refreshed specs may lack it
    acs_url: str | None = Field(default=None, validate_default=True)
    sso_url: Annotated[str, Field(min_length=1)]
    sso_binding: Binding = Binding.POST
    sso_destination: str | None = None
    name_format: str = UNSPECIFIED_NAME_FORMAT

    # Trust
    issuer: Annotated[str, Field(min_length=1)]
    audience: Annotated[str, Field(min_length=1)]
    kid: Annotated[str, Field(min_length=1)]

    # Subject
    subject_format: frozenset[str] = Field(default_factory=frozenset)
    subject_filter: str | None = None
    subject_match_type: SubjectMatchType = SubjectMatchType.USERNAME
    subject_match_attribute: str | None = None
    username_template: str = DEFAULT_USERNAME_TEMPLATE

    # Provisioning
    provisioning_action: ProvisioningAction = ProvisioningAction.AUTO
    deprovisioned_action: LifecycleAction = LifecycleAction.NONE
    suspended_action: LifecycleAction = LifecycleAction.NONE
    profile_master: bool = False
    groups_action: GroupsAction = GroupsAction.NONE
    groups_attribute: str | None = None
    groups_assignment: frozenset[str] = Field(default_factory=frozenset)
    groups_filter: frozenset[str] = Field(default_factory=frozenset)

    # Account linking
    account_link_action: AccountLinkAction | None = AccountLinkAction.AUTO
    account_link_group_include: frozenset[str] = Field(default_factory=frozenset)

    # Algorithms
    request_signature_algorithm: SignatureAlgorithm = SignatureAlgorithm.SHA_256
    request_signature_scope: RequestSignatureScope = RequestSignatureScope.REQUEST
    response_signature_algorithm: SignatureAlgorithm = SignatureAlgorithm.SHA_256
    response_signature_scope: ResponseSignatureScope = ResponseSignatureScope.ANY

    max_clock_skew: Annotated[int, Field(ge=0)] = 0

    @field_validator("sso_url", "acs_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("https://", "http://")):
            raise ValueError("must be an http(s) URL")
        return v

    @field_validator("acs_url")
    @classmethod
    def require_acs_url(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None and not (info.context or {}).get("from_remote"):
            raise ValueError("Field required")
        return v

    @field_validator(*SET_FIELDS)
    @classmethod
    def drop_blank_members(cls, v: frozenset[str]) -> frozenset[str]:
        return frozenset(item for item in v if item)
