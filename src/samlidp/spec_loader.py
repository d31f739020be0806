"""Reading identity provider specs from YAML.

SECURITY: Files are size-checked before they are read. Everything past this
module works with a validated SamlIdpSpec.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .config import MAX_SPEC_FILE_SIZE_BYTES
from .schema import SamlIdpSpec

logger = logging.getLogger(__name__)


class SpecLoadError(Exception):
    """Raised when a spec file cannot be read, parsed or validated."""

    pass


def _describe_validation_error(error: ValidationError) -> str:
    """One ``  - loc: msg`` line per pydantic error."""
    return "\n".join(
        "  - {}: {}".format(".".join(str(part) for part in item["loc"]), item["msg"])
        for item in error.errors()
    )


def parse_spec(raw_data: Any, source: str = "<data>") -> SamlIdpSpec:
    """Validate already-decoded spec data.

    Accepts either the flat mapping or a Kubernetes-style document with
    ``apiVersion``/``kind``/``spec``, in which case the ``spec`` section is used.

    Raises:
        SpecLoadError: If the data is not a mapping or fails validation.
    """
    if not isinstance(raw_data, dict):
        raise SpecLoadError(f"Spec must be a YAML mapping: {source}")

    body = raw_data
    if "apiVersion" in raw_data and "spec" in raw_data:
        body = raw_data["spec"]
        if not isinstance(body, dict):
            raise SpecLoadError(f"Spec section must be a mapping: {source}")

    try:
        return SamlIdpSpec.model_validate(body)
    except ValidationError as e:
        raise SpecLoadError(
            f"Validation failed for {source}:\n{_describe_validation_error(e)}"
        ) from e


def _read_bounded(spec_path: Path) -> str:
    if not spec_path.is_file():
        raise SpecLoadError(f"Spec file not found: {spec_path}")

    try:
        size = spec_path.stat().st_size
        if size > MAX_SPEC_FILE_SIZE_BYTES:
            raise SpecLoadError(
                f"Spec file {spec_path} is {size} bytes, "
                f"over the maximum size of {MAX_SPEC_FILE_SIZE_BYTES}"
            )
        return spec_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SpecLoadError(f"Cannot read spec file {spec_path}: {e}") from e


def load_spec(spec_path: Path) -> SamlIdpSpec:
    """Load and validate an identity provider spec from YAML.

    Raises:
        SpecLoadError: If the file cannot be read, parsed or validated.
    """
    content = _read_bounded(spec_path)

    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"Invalid YAML in {spec_path}: {e}") from e

    spec = parse_spec(document, str(spec_path))
    logger.info("Loaded spec for identity provider '%s' from %s", spec.name, spec_path)
    return spec


def dump_spec(spec: SamlIdpSpec) -> str:
    """Render a spec as YAML with set-valued fields sorted."""
    data = spec.model_dump(mode="json", exclude_none=True)
    for key, value in data.items():
        if isinstance(value, list):
            data[key] = sorted(value)
    return yaml.safe_dump(data, sort_keys=True)
