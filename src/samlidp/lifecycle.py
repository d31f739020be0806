"""Lifecycle controller for a SAML identity provider.

Implements the create/read/update/delete/exists/import contract a
declarative-infrastructure engine expects. Each operation is a fixed,
blocking sequence of remote calls:

    create: build -> create call -> status call (if needed) -> read
    update: build -> update call -> status call (if needed) -> read
    read:   fetch -> sync
    delete: delete call
    exists: fetch, with not-found meaning False
    import: read from a bare identifier

No operation retries or rolls back. Remote errors propagate unmodified,
except that ``exists`` downgrades not-found and a failure after a successful
create call is re-raised carrying the new identifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from .client import IdpClient, RemoteClientError, RemoteNotFoundError
from .mapper import build, spec_from_remote, sync
from .schema import SamlIdpSpec
from .status import reconcile_status

logger = logging.getLogger(__name__)


class IncompleteCreateError(Exception):
    """Raised when the create call succeeded but refreshing the new object failed.

    The remote object exists. ``resource_id`` lets the caller keep tracking it
    instead of creating a duplicate on the next run.
    """

    def __init__(self, resource_id: str, message: str) -> None:
        super().__init__(message)
        self.resource_id = resource_id


@dataclass(frozen=True)
class ResourceState:
    """A remote identity provider as known locally: its id and its spec."""

    id: str
    spec: SamlIdpSpec


class SamlIdpResource:
    """Reconciles one SAML identity provider against the remote platform.

    Holds no per-resource state; every call builds its domain objects fresh
    from the spec it is given, so one instance can serve many resources.
    """

    def __init__(self, client: IdpClient) -> None:
        self._client = client

    def create(self, spec: SamlIdpSpec) -> ResourceState:
        """Create the identity provider and return its refreshed state.

        Raises:
            RemoteClientError: If the create call fails. No id is assigned.
            StatusReconciliationError: If the object was created but its
                status could not be set. ``resource_id`` carries the new id.
            IncompleteCreateError: If the object was created but the final
                read failed. ``resource_id`` carries the new id.
        """
        created = self._client.create_idp(build(spec))
        if not created.id:
            raise RemoteClientError("Remote create returned no identifier")

        logger.info(
            "Created identity provider",
            extra={"idp_id": created.id, "idp_name": spec.name, "remote_status": created.status},
        )

        reconcile_status(self._client, created.id, created.status, spec.status.value)

        try:
            return self.read(created.id, spec)
        except (RemoteClientError, ValidationError) as e:
            logger.error(
                "Refresh after create failed",
                extra={"idp_id": created.id, "idp_name": spec.name},
            )
            raise IncompleteCreateError(
                created.id, f"Created {created.id} but could not read it back: {e}"
            ) from e

    def read(self, resource_id: str, spec: SamlIdpSpec | None = None) -> ResourceState:
        """Fetch the remote object and refresh the local spec from it.

        Args:
            resource_id: Remote identifier.
            spec: Current local spec. Attributes the remote omits keep their
                value from here. Without it the spec is populated from the
                remote object alone.

        Raises:
            RemoteNotFoundError: If the identifier no longer resolves.
        """
        idp = self._client.get_idp(resource_id)
        refreshed = sync(idp, spec) if spec is not None else spec_from_remote(idp)
        return ResourceState(id=resource_id, spec=refreshed)

    def update(self, state: ResourceState) -> ResourceState:
        """Replace the remote object with the one built from ``state.spec``.

        The update and the status call are not atomic. If the status call
        fails the object keeps its new configuration with a stale status,
        which the next read will surface.

        Raises:
            RemoteClientError: If the update call fails.
            StatusReconciliationError: If the status call fails.
        """
        updated = self._client.update_idp(state.id, build(state.spec))

        logger.info(
            "Updated identity provider",
            extra={"idp_id": state.id, "idp_name": state.spec.name},
        )

        reconcile_status(self._client, state.id, updated.status, state.spec.status.value)
        return self.read(state.id, state.spec)

    def delete(self, resource_id: str) -> None:
        """Delete the remote object.

        Raises:
            RemoteNotFoundError: If it is already gone. Whether that counts
                as success is the caller's call.
        """
        self._client.delete_idp(resource_id)
        logger.info("Deleted identity provider", extra={"idp_id": resource_id})

    def exists(self, resource_id: str) -> bool:
        """Return whether the identifier still resolves remotely."""
        try:
            self._client.get_idp(resource_id)
        except RemoteNotFoundError:
            logger.info("Identity provider not found", extra={"idp_id": resource_id})
            return False
        return True

    def import_resource(self, resource_id: str) -> ResourceState:
        """Adopt an existing remote object by identifier."""
        logger.info("Importing identity provider", extra={"idp_id": resource_id})
        return self.read(resource_id)
