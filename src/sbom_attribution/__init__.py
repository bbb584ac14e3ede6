"""SBOM Attribution - third-party license reports from a software bill of materials.

This package normalizes the license declarations of a CycloneDX SBOM,
groups packages by license, resolves license texts and renders the
attribution documents.
"""

__version__ = "0.1.0"

from sbom_attribution.models import (
    AttributionReport,
    Component,
    LicenseRecord,
    LicenseText,
    OverviewEntry,
    SbomComponent,
)

__all__ = [
    "__version__",
    "AttributionReport",
    "Component",
    "LicenseRecord",
    "LicenseText",
    "OverviewEntry",
    "SbomComponent",
]
