"""Tests for spec file loading."""

from pathlib import Path
from typing import Any

import pytest
import yaml

from samlidp.config import MAX_SPEC_FILE_SIZE_BYTES
from samlidp.spec_loader import SpecLoadError, dump_spec, load_spec, parse_spec


class TestLoadSpec:
    """Tests for load_spec."""

    def test_flat_format(self, tmp_path: Path, minimal_spec_data: dict[str, Any]) -> None:
        """Test loading a flat spec file."""
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_text(yaml.safe_dump(minimal_spec_data))

        spec = load_spec(spec_file)

        assert spec.name == "Example IdP"
        assert spec.kid == "key-1"

    def test_kubernetes_style_wrapper(
        self, tmp_path: Path, minimal_spec_data: dict[str, Any]
    ) -> None:
        """Test that the spec section of an apiVersion/kind document is used."""
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_text(
            yaml.safe_dump(
                {
                    "apiVersion": "samlidp/v1",
                    "kind": "SamlIdentityProvider",
                    "metadata": {"name": "example"},
                    "spec": minimal_spec_data,
                }
            )
        )

        spec = load_spec(spec_file)

        assert spec.sso_url == "https://idp.example.com/sso"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SpecLoadError) as exc_info:
            load_spec(tmp_path / "missing.yaml")

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_text("name: [unclosed\n")

        with pytest.raises(SpecLoadError) as exc_info:
            load_spec(spec_file)

        assert "Invalid YAML" in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_text("- just\n- a list\n")

        with pytest.raises(SpecLoadError) as exc_info:
            load_spec(spec_file)

        assert "mapping" in str(exc_info.value)

    def test_too_large(self, tmp_path: Path) -> None:
        """Test that oversized files are rejected before reading."""
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_text("#" * (MAX_SPEC_FILE_SIZE_BYTES + 1))

        with pytest.raises(SpecLoadError) as exc_info:
            load_spec(spec_file)

        assert "maximum size" in str(exc_info.value)

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_bytes(b"name: \xff\xfe\n")

        with pytest.raises(SpecLoadError) as exc_info:
            load_spec(spec_file)

        assert "Cannot read spec file" in str(exc_info.value)

    def test_validation_errors_are_listed(self, minimal_spec_data: dict[str, Any]) -> None:
        """Test that pydantic errors are flattened to loc: msg lines."""
        del minimal_spec_data["kid"]
        minimal_spec_data["sso_binding"] = "HTTP-ARTIFACT"

        with pytest.raises(SpecLoadError) as exc_info:
            parse_spec(minimal_spec_data, "idp.yaml")

        message = str(exc_info.value)
        assert "Validation failed for idp.yaml" in message
        assert "  - kid:" in message
        assert "  - sso_binding:" in message


class TestDumpSpec:
    """Tests for dump_spec."""

    def test_sets_are_sorted(self, minimal_spec_data: dict[str, Any]) -> None:
        """Test that set-valued fields render in a stable order."""
        spec = parse_spec({**minimal_spec_data, "subject_format": ["z", "a", "m"]})

        data = yaml.safe_load(dump_spec(spec))

        assert data["subject_format"] == ["a", "m", "z"]
        assert data["sso_binding"] == "HTTP-POST"
        assert "sso_destination" not in data

    def test_dump_then_load(self, tmp_path: Path, minimal_spec_data: dict[str, Any]) -> None:
        """Test that a dumped spec loads back to the same value."""
        spec = parse_spec(minimal_spec_data)
        spec_file = tmp_path / "idp.yaml"
        spec_file.write_text(dump_spec(spec))

        assert load_spec(spec_file) == spec
