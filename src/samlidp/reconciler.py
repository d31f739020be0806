"""One-shot convergence of a declared identity provider.

Decides which lifecycle operation brings the remote in line with a spec:

1. No known identifier: create
2. Identifier no longer resolves (deleted out of band): create again
3. Live state drifted from the spec: update (full replacement)
4. Otherwise: nothing to do

Errors are captured on the result rather than raised, so a caller can
report the outcome and keep whatever identifier was assigned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from pydantic import ValidationError

from .client import RemoteClientError, RemoteNotFoundError
from .drift import FieldDrift, detect_drift
from .lifecycle import IncompleteCreateError, ResourceState, SamlIdpResource
from .schema import SamlIdpSpec
from .status import StatusReconciliationError

logger = logging.getLogger(__name__)


class ReconcileAction(str, Enum):
    """Lifecycle operation chosen for a reconcile."""

    CREATE = "create"
    UPDATE = "update"
    NONE = "none"


@dataclass
class ReconcileResult:
    """Outcome of planning or applying one spec."""

    idp_name: str
    action: ReconcileAction = ReconcileAction.NONE
    resource_id: str | None = None
    drift: list[FieldDrift] = field(default_factory=list)
    dry_run: bool = False
    applied: bool = False
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    error: Exception | None = None

    @property
    def duration_seconds(self) -> float:
        """Wall-clock time the reconcile took, 0 while still running."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def success(self) -> bool:
        """True unless an error was captured."""
        return self.error is None


class Reconciler:
    """Plans and applies lifecycle operations for declared specs."""

    def __init__(self, resource: SamlIdpResource, *, dry_run: bool = False) -> None:
        self._resource = resource
        self._dry_run = dry_run

    def plan(self, spec: SamlIdpSpec, resource_id: str | None = None) -> ReconcileResult:
        """Work out what a reconcile would do, without any remote writes."""
        result = ReconcileResult(idp_name=spec.name, resource_id=resource_id, dry_run=self._dry_run)

        if resource_id is None:
            result.action = ReconcileAction.CREATE
            return result

        try:
            live = self._resource.read(resource_id, spec)
        except RemoteNotFoundError:
            logger.warning(
                "Identity provider was deleted remotely, planning recreate",
                extra={"idp_id": resource_id, "idp_name": spec.name},
            )
            result.action = ReconcileAction.CREATE
            result.resource_id = None
            return result
        except (RemoteClientError, ValidationError) as e:
            # Includes remote values the schema does not accept
            result.error = e
            return result

        result.drift = detect_drift(spec, live.spec)
        if result.drift:
            result.action = ReconcileAction.UPDATE
        return result

    def reconcile(self, spec: SamlIdpSpec, resource_id: str | None = None) -> ReconcileResult:
        """Plan, then apply the planned operation unless in dry-run mode."""
        result = self.plan(spec, resource_id)

        if result.error is None and result.action != ReconcileAction.NONE and not self._dry_run:
            self._apply(result, spec)

        result.end_time = datetime.now(UTC)
        self._log_result(result)
        return result

    def _apply(self, result: ReconcileResult, spec: SamlIdpSpec) -> None:
        try:
            if result.action == ReconcileAction.CREATE:
                state = self._resource.create(spec)
            else:
                assert result.resource_id is not None
                state = self._resource.update(ResourceState(id=result.resource_id, spec=spec))
        except (StatusReconciliationError, IncompleteCreateError) as e:
            # Main write landed; keep the id so the next run does not create again
            result.resource_id = e.resource_id
            result.error = e
            return
        except (RemoteClientError, ValidationError) as e:
            result.error = e
            return

        result.resource_id = state.id
        result.applied = True

    def _log_result(self, result: ReconcileResult) -> None:
        extra = {
            "idp_name": result.idp_name,
            "idp_id": result.resource_id,
            "action": result.action.value,
            "drift_fields": [d.field for d in result.drift],
            "dry_run": result.dry_run,
            "applied": result.applied,
            "duration_seconds": result.duration_seconds,
        }
        if result.error is not None:
            logger.error(
                "Reconcile failed",
                extra={**extra, "error": str(result.error), "error_type": type(result.error).__name__},
            )
        else:
            logger.info("Reconcile completed", extra=extra)
