"""Activation status reconciliation.

The platform models activation as a state transition with its own endpoints,
not as a field of the main object. Status is therefore reconciled as a
separate call after the object exists, and a failure here never undoes the
preceding create or update.
"""

from __future__ import annotations

import logging

from .client import IdpClient, RemoteClientError
from .constants import IdpStatus

logger = logging.getLogger(__name__)


class StatusReconciliationError(Exception):
    """Raised when the main write succeeded but the status call failed.

    The remote object exists and is configured; only its activation state is
    stale. ``resource_id`` lets the caller keep tracking it.
    """

    def __init__(self, resource_id: str, desired_status: str, message: str) -> None:
        super().__init__(message)
        self.resource_id = resource_id
        self.desired_status = desired_status


def reconcile_status(
    client: IdpClient,
    idp_id: str,
    current: str | None,
    desired: str,
) -> bool:
    """Bring the remote activation status in line with the desired one.

    Args:
        client: Remote client.
        idp_id: Identifier of an existing identity provider.
        current: Status the remote object has right now.
        desired: Status declared in the spec.

    Returns:
        True if a status call was issued, False if nothing needed to change.

    Raises:
        StatusReconciliationError: If the activate/deactivate call failed.
    """
    if current == desired:
        return False

    try:
        if desired == IdpStatus.INACTIVE:
            client.deactivate_idp(idp_id)
        else:
            client.activate_idp(idp_id)
    except RemoteClientError as e:
        logger.error(
            "Status reconciliation failed",
            extra={"idp_id": idp_id, "current_status": current, "desired_status": desired},
        )
        raise StatusReconciliationError(
            idp_id, desired, f"Failed to set status of {idp_id} to {desired}: {e}"
        ) from e

    logger.info(
        "Identity provider status changed",
        extra={"idp_id": idp_id, "from_status": current, "to_status": desired},
    )
    return True
