"""Tests for the identity provider lifecycle controller."""

from typing import Any

import pytest
from okta_mock import MockIdpClient, not_found

from samlidp.client import RemoteClientError, RemoteNotFoundError, RemoteRejectedError
from samlidp.lifecycle import IncompleteCreateError, ResourceState, SamlIdpResource
from samlidp.mapper import build
from samlidp.schema import SamlIdpSpec
from samlidp.status import StatusReconciliationError


class TestCreate:
    """Tests for SamlIdpResource.create."""

    def test_create_inactive_deactivates_once(
        self, minimal_spec_data: dict[str, Any], mock_client: MockIdpClient
    ) -> None:
        """Test that a declared INACTIVE status deactivates the new IdP before the final read."""
        spec = SamlIdpSpec.model_validate({**minimal_spec_data, "status": "INACTIVE"})
        resource = SamlIdpResource(mock_client)

        state = resource.create(spec)

        assert state.id == "0oa1b2c3"
        assert mock_client.calls == [
            ("create_idp", None),
            ("deactivate_idp", "0oa1b2c3"),
            ("get_idp", "0oa1b2c3"),
        ]
        assert state.spec.status.value == "INACTIVE"

    def test_create_active_skips_status_call(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that no status call is made when the default matches."""
        state = resource.create(spec)

        assert mock_client.call_names() == ["create_idp", "get_idp"]
        assert state.spec == spec

    def test_create_submits_built_object(
        self, full_spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that the stored object is the one built from the spec."""
        state = resource.create(full_spec)

        stored = mock_client.stored(state.id)
        assert stored["protocol"]["credentials"]["trust"]["kid"] == "key-1"
        assert stored["policy"]["subject"]["matchAttribute"] == "customId"

    def test_create_failure_propagates(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that a rejected create raises unmodified and makes no further calls."""
        error = RemoteRejectedError("Api validation failed: kid", status_code=400)
        mock_client.fail_on("create_idp", error)

        with pytest.raises(RemoteRejectedError) as exc_info:
            resource.create(spec)

        assert exc_info.value is error
        assert mock_client.call_names() == ["create_idp"]

    def test_create_status_failure_keeps_id(
        self, minimal_spec_data: dict[str, Any], mock_client: MockIdpClient
    ) -> None:
        """Test that a failed status call after create reports the created id."""
        spec = SamlIdpSpec.model_validate({**minimal_spec_data, "status": "INACTIVE"})
        mock_client.fail_on("deactivate_idp", RemoteClientError("boom", status_code=500))

        with pytest.raises(StatusReconciliationError) as exc_info:
            SamlIdpResource(mock_client).create(spec)

        assert exc_info.value.resource_id == "0oa1b2c3"
        # The object itself was not rolled back
        assert mock_client.status_of("0oa1b2c3") == "ACTIVE"

    def test_create_read_back_failure_keeps_id(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that a failed read after create still reports the created id."""
        cause = RemoteClientError("service unavailable", status_code=503)
        mock_client.fail_on("get_idp", cause)

        with pytest.raises(IncompleteCreateError) as exc_info:
            resource.create(spec)

        assert exc_info.value.resource_id == "0oa1b2c3"
        assert exc_info.value.__cause__ is cause
        assert mock_client.stored("0oa1b2c3")["name"] == "Example IdP"


class TestRead:
    """Tests for SamlIdpResource.read."""

    def test_read_not_found_propagates(self, resource: SamlIdpResource) -> None:
        """Test that a missing id raises RemoteNotFoundError."""
        with pytest.raises(RemoteNotFoundError):
            resource.read("0oamissing")

    def test_read_keeps_local_issuer_mode_when_omitted(
        self, full_spec: SamlIdpSpec, mock_client: MockIdpClient
    ) -> None:
        """Test that an issuer mode missing from the response is not cleared."""
        resource = SamlIdpResource(mock_client)
        state = resource.create(full_spec)
        mock_client.omit_paths.append(("issuerMode",))

        refreshed = resource.read(state.id, full_spec)

        assert refreshed.spec.issuer_mode.value == "CUSTOM_URL"

    def test_read_picks_up_remote_changes(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that out-of-band changes show up in the refreshed spec."""
        state = resource.create(spec)
        mock_client.stored(state.id)["name"] = "Changed in console"

        refreshed = resource.read(state.id, spec)

        assert refreshed.spec.name == "Changed in console"


class TestUpdate:
    """Tests for SamlIdpResource.update."""

    def test_update_replaces_and_reads(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test the update -> read sequence when status is unchanged."""
        state = resource.create(spec)
        mock_client.calls.clear()
        changed = spec.model_copy(update={"kid": "key-2"})

        updated = resource.update(ResourceState(id=state.id, spec=changed))

        assert mock_client.calls == [("update_idp", "0oa1b2c3"), ("get_idp", "0oa1b2c3")]
        assert updated.spec.kid == "key-2"
        assert mock_client.stored("0oa1b2c3")["protocol"]["credentials"]["trust"]["kid"] == "key-2"

    def test_update_reconciles_status(
        self, full_spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that a status change is applied with one extra call."""
        state = resource.create(full_spec)
        assert mock_client.status_of(state.id) == "INACTIVE"
        mock_client.calls.clear()
        active = SamlIdpSpec.model_validate({**full_spec.model_dump(), "status": "ACTIVE"})

        resource.update(ResourceState(id=state.id, spec=active))

        assert mock_client.call_names() == ["update_idp", "activate_idp", "get_idp"]
        assert mock_client.status_of(state.id) == "ACTIVE"

    def test_update_status_failure_persists_object(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that the main update stays applied when the status call fails."""
        state = resource.create(spec)
        mock_client.fail_on("deactivate_idp", RemoteClientError("timeout"))
        inactive = SamlIdpSpec.model_validate(
            {**spec.model_dump(), "status": "INACTIVE", "name": "Renamed"}
        )

        with pytest.raises(StatusReconciliationError) as exc_info:
            resource.update(ResourceState(id=state.id, spec=inactive))

        assert exc_info.value.resource_id == state.id
        assert mock_client.stored(state.id)["name"] == "Renamed"
        assert mock_client.status_of(state.id) == "ACTIVE"

    def test_update_not_found_propagates(
        self, spec: SamlIdpSpec, resource: SamlIdpResource
    ) -> None:
        """Test that updating a vanished IdP raises RemoteNotFoundError."""
        with pytest.raises(RemoteNotFoundError):
            resource.update(ResourceState(id="0oagone", spec=spec))


class TestDeleteAndExists:
    """Tests for delete, exists and import."""

    def test_delete(
        self, spec: SamlIdpSpec, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        state = resource.create(spec)

        resource.delete(state.id)

        assert resource.exists(state.id) is False

    def test_delete_missing_propagates_not_found(
        self, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that deleting a missing id returns the not-found error unmodified."""
        with pytest.raises(RemoteNotFoundError) as exc_info:
            resource.delete("0oa1b2c3")

        assert exc_info.value.status_code == 404
        assert mock_client.calls == [("delete_idp", "0oa1b2c3")]

    def test_exists_true(self, spec: SamlIdpSpec, resource: SamlIdpResource) -> None:
        state = resource.create(spec)

        assert resource.exists(state.id) is True

    def test_exists_false_on_not_found(self, resource: SamlIdpResource) -> None:
        """Test that not-found is downgraded to False."""
        assert resource.exists("0oamissing") is False

    def test_exists_propagates_other_errors(
        self, resource: SamlIdpResource, mock_client: MockIdpClient
    ) -> None:
        """Test that only not-found is downgraded."""
        mock_client.fail_on("get_idp", RemoteClientError("service unavailable", status_code=503))

        with pytest.raises(RemoteClientError):
            resource.exists("0oa1b2c3")

    def test_import(self, full_spec: SamlIdpSpec, mock_client: MockIdpClient) -> None:
        """Test that import populates the spec from the remote object alone."""
        mock_client.seed("0oaexisting", build(full_spec).to_payload())
        mock_client.stored("0oaexisting")["status"] = "INACTIVE"

        state = SamlIdpResource(mock_client).import_resource("0oaexisting")

        assert state.id == "0oaexisting"
        assert mock_client.call_names() == ["get_idp"]
        assert state.spec.subject_format == full_spec.subject_format
        assert state.spec.status.value == "INACTIVE"
        assert state.spec.issuer == "urn:example:idp"

    def test_import_without_account_link(
        self, spec: SamlIdpSpec, mock_client: MockIdpClient
    ) -> None:
        """Test that an IdP without an account link imports as declaring none."""
        body = build(spec).to_payload()
        del body["policy"]["accountLink"]
        mock_client.seed("0oaexisting", body)

        state = SamlIdpResource(mock_client).import_resource("0oaexisting")

        assert state.spec.account_link_action is None
        assert build(state.spec).policy.account_link is None

    def test_import_not_found(self, resource: SamlIdpResource, mock_client: MockIdpClient) -> None:
        """Test that import does not downgrade not-found."""
        mock_client.fail_on("get_idp", not_found("0oa404"))

        with pytest.raises(RemoteNotFoundError):
            resource.import_resource("0oa404")
