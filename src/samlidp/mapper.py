"""Bidirectional mapping between the flat spec and the nested domain model.

build: SamlIdpSpec -> SamlIdentityProvider (what gets submitted)
sync:  SamlIdentityProvider -> SamlIdpSpec (what the remote says is true)

Both directions are pure. Neither touches the network, and neither mutates
its input: every call constructs fresh objects.

The sync direction only writes attributes the remote actually returned. A
field missing from a response leaves the local value untouched, otherwise an
API that echoes back a subset of what was submitted would show drift on
every run.
"""

from __future__ import annotations

from typing import Any

from .models import (
    AccountLink,
    AccountLinkFilter,
    AcsEndpoint,
    Algorithms,
    ConditionAction,
    GroupInclusion,
    ProtocolSettings,
    Provisioning,
    ProvisioningConditions,
    ProvisioningGroups,
    SamlCredentials,
    SamlEndpoints,
    SamlIdentityProvider,
    SamlPolicy,
    SamlProtocol,
    SamlSubject,
    Signature,
    SignatureSettings,
    SsoEndpoint,
    Trust,
    UserNameTemplate,
)
from .schema import FROM_REMOTE, SamlIdpSpec

# =============================================================================
# Spec -> model
# =============================================================================


def build(spec: SamlIdpSpec) -> SamlIdentityProvider:
    """Construct the domain object to submit for a spec.

    Status is deliberately left unset; activation is reconciled through the
    lifecycle endpoints after the object exists.
    """
    return SamlIdentityProvider(
        name=spec.name,
        issuer_mode=spec.issuer_mode.value,
        policy=SamlPolicy(
            account_link=build_account_link(spec),
            provisioning=build_provisioning(spec),
            subject=SamlSubject(
                filter=spec.subject_filter,
                formats=spec.subject_format,
                match_type=spec.subject_match_type.value,
                match_attribute=spec.subject_match_attribute,
                user_name_template=UserNameTemplate(template=spec.username_template),
            ),
            max_clock_skew=spec.max_clock_skew,
        ),
        protocol=SamlProtocol(
            algorithms=build_algorithms(spec),
            endpoints=SamlEndpoints(
                acs=AcsEndpoint(binding=spec.acs_binding.value, type=spec.acs_type.value),
                sso=SsoEndpoint(
                    binding=spec.sso_binding.value,
                    destination=spec.sso_destination,
                    url=spec.sso_url,
                ),
            ),
            credentials=SamlCredentials(
                trust=Trust(issuer=spec.issuer, audience=spec.audience, kid=spec.kid),
            ),
            settings=ProtocolSettings(name_format=spec.name_format),
        ),
    )


def build_account_link(spec: SamlIdpSpec) -> AccountLink | None:
    """Account link policy, or None when no action is declared."""
    if spec.account_link_action is None:
        return None

    link_filter = None
    if spec.account_link_group_include:
        link_filter = AccountLinkFilter(
            groups=GroupInclusion(include=spec.account_link_group_include)
        )

    return AccountLink(action=spec.account_link_action.value, filter=link_filter)


def build_provisioning(spec: SamlIdpSpec) -> Provisioning:
    return Provisioning(
        action=spec.provisioning_action.value,
        profile_master=spec.profile_master,
        conditions=ProvisioningConditions(
            deprovisioned=ConditionAction(action=spec.deprovisioned_action.value),
            suspended=ConditionAction(action=spec.suspended_action.value),
        ),
        groups=ProvisioningGroups(
            action=spec.groups_action.value,
            source_attribute_name=spec.groups_attribute,
            # Empty collections are omitted rather than sent as []
            assignments=spec.groups_assignment or None,
            filter=spec.groups_filter or None,
        ),
    )


def build_algorithms(spec: SamlIdpSpec) -> Algorithms:
    return Algorithms(
        request=SignatureSettings(
            signature=Signature(
                algorithm=spec.request_signature_algorithm.value,
                scope=spec.request_signature_scope.value,
            )
        ),
        response=SignatureSettings(
            signature=Signature(
                algorithm=spec.response_signature_algorithm.value,
                scope=spec.response_signature_scope.value,
            )
        ),
    )


# =============================================================================
# Model -> spec
# =============================================================================


def _put(updates: dict[str, Any], key: str, value: Any) -> None:
    """Record an update only when the remote returned the field."""
    if value is not None:
        updates[key] = value


def sync_fields(idp: SamlIdentityProvider) -> dict[str, Any]:
    """Collect spec attribute updates from a remote identity provider.

    Returns:
        Mapping of spec field name to value. Fields the remote omitted are
        absent from the mapping.
    """
    updates: dict[str, Any] = {}

    _put(updates, "name", idp.name)
    _put(updates, "status", idp.status)

    # An empty issuer mode is as good as missing
    if idp.issuer_mode:
        updates["issuer_mode"] = idp.issuer_mode

    if idp.policy is not None:
        updates.update(_sync_policy(idp.policy))
    if idp.protocol is not None:
        updates.update(_sync_protocol(idp.protocol))

    return updates


def _sync_policy(policy: SamlPolicy) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    _put(updates, "max_clock_skew", policy.max_clock_skew)

    provisioning = policy.provisioning
    if provisioning is not None:
        _put(updates, "provisioning_action", provisioning.action)
        _put(updates, "profile_master", provisioning.profile_master)

        conditions = provisioning.conditions
        if conditions is not None:
            if conditions.deprovisioned is not None:
                _put(updates, "deprovisioned_action", conditions.deprovisioned.action)
            if conditions.suspended is not None:
                _put(updates, "suspended_action", conditions.suspended.action)

        groups = provisioning.groups
        if groups is not None:
            _put(updates, "groups_action", groups.action)
            _put(updates, "groups_attribute", groups.source_attribute_name)
            _put(updates, "groups_assignment", groups.assignments)
            _put(updates, "groups_filter", groups.filter)

    subject = policy.subject
    if subject is not None:
        _put(updates, "subject_match_type", subject.match_type)
        _put(updates, "subject_match_attribute", subject.match_attribute)
        _put(updates, "subject_filter", subject.filter)
        # Set-valued: a reordered response compares equal to the local set
        _put(updates, "subject_format", subject.formats)
        if subject.user_name_template is not None:
            _put(updates, "username_template", subject.user_name_template.template)

    account_link = policy.account_link
    if account_link is not None:
        _put(updates, "account_link_action", account_link.action)
        include: frozenset[str] = frozenset()
        if account_link.filter is not None and account_link.filter.groups is not None:
            include = account_link.filter.groups.include
        updates["account_link_group_include"] = include

    return updates


def _sync_protocol(protocol: SamlProtocol) -> dict[str, Any]:
    updates: dict[str, Any] = {}

    endpoints = protocol.endpoints
    if endpoints is not None:
        if endpoints.acs is not None:
            _put(updates, "acs_binding", endpoints.acs.binding)
            _put(updates, "acs_type", endpoints.acs.type)
        if endpoints.sso is not None:
            _put(updates, "sso_binding", endpoints.sso.binding)
            _put(updates, "sso_destination", endpoints.sso.destination)
            _put(updates, "sso_url", endpoints.sso.url)

    if protocol.credentials is not None and protocol.credentials.trust is not None:
        trust = protocol.credentials.trust
        _put(updates, "issuer", trust.issuer)
        _put(updates, "audience", trust.audience)
        _put(updates, "kid", trust.kid)

    if protocol.settings is not None:
        _put(updates, "name_format", protocol.settings.name_format)

    updates.update(sync_algorithms(protocol.algorithms))
    return updates


def sync_algorithms(algorithms: Algorithms | None) -> dict[str, Any]:
    """Map signature settings onto the flat ``*_signature_*`` attributes."""
    updates: dict[str, Any] = {}
    if algorithms is None:
        return updates

    for direction, settings in (("request", algorithms.request), ("response", algorithms.response)):
        if settings is None or settings.signature is None:
            continue
        _put(updates, f"{direction}_signature_algorithm", settings.signature.algorithm)
        _put(updates, f"{direction}_signature_scope", settings.signature.scope)

    return updates


def sync(idp: SamlIdentityProvider, spec: SamlIdpSpec) -> SamlIdpSpec:
    """Refresh a spec from the remote object.

    Returns a new, re-validated spec; the input spec is not modified.
    """
    return SamlIdpSpec.model_validate(
        {**spec.model_dump(), **sync_fields(idp)}, context=FROM_REMOTE
    )


def spec_from_remote(idp: SamlIdentityProvider) -> SamlIdpSpec:
    """Populate a spec from the remote object alone (used on import).

    Fields the remote omits take schema defaults, except the account link:
    an object without one must not import as declaring one.

    Raises:
        pydantic.ValidationError: If the remote object lacks a required field.
    """
    fields = sync_fields(idp)
    if idp.policy is None or idp.policy.account_link is None:
        fields["account_link_action"] = None
    return SamlIdpSpec.model_validate(fields, context=FROM_REMOTE)
