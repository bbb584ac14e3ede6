"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from sbom_attribution.cache import LicenseTextCache
from sbom_attribution.models import SbomComponent

SPDX_BASE = "https://raw.githubusercontent.com/spdx/license-list-data/v3.27.0"


@pytest.fixture
def spdx_base_url() -> str:
    """Return the base URL of the pinned SPDX license list data."""
    return SPDX_BASE


@pytest.fixture
def spdx_license_list() -> dict[str, Any]:
    """Return a trimmed SPDX licenses.json document."""
    return {
        "licenseListVersion": "3.27",
        "licenses": [
            {"licenseId": "MIT", "name": "MIT License"},
            {"licenseId": "Apache-2.0", "name": "Apache License 2.0"},
            {"licenseId": "BSD-3-Clause", "name": 'BSD 3-Clause "New" or "Revised" License'},
        ],
    }


@pytest.fixture
def text_cache(tmp_path: Path) -> LicenseTextCache:
    """Create a LicenseTextCache in a temporary directory."""
    return LicenseTextCache(tmp_path / "third_party" / "licenses")


@pytest.fixture
def custom_dir(tmp_path: Path) -> Path:
    """Create an empty custom license text directory."""
    path = tmp_path / "custom-license-texts"
    path.mkdir()
    return path


@pytest.fixture
def sample_components() -> list[SbomComponent]:
    """Return SBOM components covering the common declaration shapes."""
    return [
        SbomComponent(
            name="left-pad",
            version="1.3.0",
            purl="pkg:npm/left-pad@1.3.0",
            licenses=({"license": {"id": "MIT"}},),
            copyright="Copyright (c) Azer Koculu",
        ),
        SbomComponent(
            name="requests",
            version="2.31.0",
            purl="pkg:pypi/requests@2.31.0",
            licenses=({"expression": "Apache-2.0"},),
        ),
        SbomComponent(
            name="bar",
            version="v1.0.0",
            purl="pkg:golang/github.com/foo/bar@v1.0.0",
            licenses=({"expression": "MIT OR Apache-2.0"},),
            copyright="Copyright Foo Authors",
        ),
    ]


@pytest.fixture
def sbom_document() -> dict[str, Any]:
    """Return a small CycloneDX document."""
    return {
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "components": [
            {
                "type": "library",
                "name": "left-pad",
                "version": "1.3.0",
                "purl": "pkg:npm/left-pad@1.3.0",
                "licenses": [{"license": {"id": "MIT"}}],
                "copyright": "Copyright (c) Azer Koculu",
            },
            {
                "type": "library",
                "name": "requests",
                "version": "2.31.0",
                "purl": "pkg:pypi/requests@2.31.0",
                "licenses": [{"expression": "Apache-2.0"}],
            },
        ],
    }


@pytest.fixture
def sbom_file(tmp_path: Path, sbom_document: dict[str, Any]) -> Path:
    """Write the sample CycloneDX document to disk."""
    path = tmp_path / "sbom.cdx.json"
    path.write_text(json.dumps(sbom_document), encoding="utf-8")
    return path
