"""Unit tests for the CycloneDX JSON scanner."""

import json
from pathlib import Path

import pytest

from sbom_attribution.scanners import CycloneDXScanner, get_scanner


class TestCycloneDXScanner:
    """Test suite for CycloneDXScanner."""

    @pytest.mark.parametrize(
        "filename", ["bom.json", "sbom.json", "traefik.cdx.json", "app.cyclonedx.json"]
    )
    def test_can_handle(self, filename):
        """Test recognized SBOM file names."""
        assert CycloneDXScanner.can_handle(Path(filename))

    @pytest.mark.parametrize("filename", ["package.json", "poetry.lock", "sbom.spdx.json"])
    def test_cannot_handle(self, filename):
        """Test that other files are not claimed."""
        assert not CycloneDXScanner.can_handle(Path(filename))

    def test_source_name(self):
        """Test the human-readable source name."""
        assert CycloneDXScanner().source_name == "CycloneDX JSON"

    def test_scan(self, sbom_file):
        """Test extracting components with raw license declarations."""
        components = CycloneDXScanner(sbom_file).scan()

        assert [c.name for c in components] == ["left-pad", "requests"]
        left_pad = components[0]
        assert left_pad.version == "1.3.0"
        assert left_pad.purl == "pkg:npm/left-pad@1.3.0"
        assert left_pad.licenses == ({"license": {"id": "MIT"}},)
        assert left_pad.copyright == "Copyright (c) Azer Koculu"
        assert components[1].licenses == ({"expression": "Apache-2.0"},)
        assert components[1].copyright is None

    def test_scan_defaults(self, tmp_path):
        """Test components without optional fields."""
        path = tmp_path / "bom.json"
        path.write_text(json.dumps({"components": [{"name": "bare"}]}))

        [component] = CycloneDXScanner(path).scan()
        assert component.version == ""
        assert component.purl is None
        assert component.licenses == ()
        assert component.copyright is None

    def test_scan_no_components(self, tmp_path):
        """Test a document without a components array."""
        path = tmp_path / "bom.json"
        path.write_text(json.dumps({"bomFormat": "CycloneDX"}))
        assert CycloneDXScanner(path).scan() == []

    def test_missing_file(self, tmp_path):
        """Test that a missing SBOM raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            CycloneDXScanner(tmp_path / "bom.json").scan()

    def test_no_source_path(self):
        """Test that scanning without a path is an error."""
        with pytest.raises(ValueError, match="source_path"):
            CycloneDXScanner().scan()

    def test_invalid_json(self, tmp_path):
        """Test that malformed JSON raises ValueError."""
        path = tmp_path / "bom.json"
        path.write_text("{ not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            CycloneDXScanner(path).scan()

    def test_component_without_name(self, tmp_path):
        """Test that a nameless component is rejected."""
        path = tmp_path / "bom.json"
        path.write_text(json.dumps({"components": [{"version": "1.0"}]}))
        with pytest.raises(ValueError, match="name"):
            CycloneDXScanner(path).scan()


def test_get_scanner(sbom_file):
    """Test scanner auto-detection."""
    scanner = get_scanner(sbom_file)
    assert isinstance(scanner, CycloneDXScanner)
    assert scanner.source_path == sbom_file


def test_get_scanner_unsupported(tmp_path):
    """Test that unsupported files raise ValueError."""
    with pytest.raises(ValueError, match="No scanner available"):
        get_scanner(tmp_path / "requirements.txt")
