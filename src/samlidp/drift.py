"""Field-level drift detection between a desired and a live spec.

Both sides are SamlIdpSpec values, so enum coercion and defaults have
already been applied. Set-valued fields are frozensets and compare as sets:
a remote that reorders subject formats does not drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .schema import SamlIdpSpec

# Never echoed back by the remote, so a live spec cannot disagree with it
IGNORED_FIELDS: frozenset[str] = frozenset({"acs_url"})


@dataclass(frozen=True)
class FieldDrift:
    """One attribute whose desired and live values differ."""

    field: str
    desired: Any
    live: Any

    def describe(self) -> str:
        return f"{self.field}: {_render(self.live)} -> {_render(self.desired)}"


def _render(value: Any) -> str:
    if isinstance(value, frozenset):
        return "[" + ", ".join(sorted(value)) + "]"
    if hasattr(value, "value"):
        return str(value.value)
    return repr(value)


def detect_drift(desired: SamlIdpSpec, live: SamlIdpSpec) -> list[FieldDrift]:
    """Compare every spec field and return the ones that differ."""
    drift: list[FieldDrift] = []
    for name in SamlIdpSpec.model_fields:
        if name in IGNORED_FIELDS:
            continue
        desired_value = getattr(desired, name)
        live_value = getattr(live, name)
        if desired_value != live_value:
            drift.append(FieldDrift(field=name, desired=desired_value, live=live_value))
    return drift
