"""SBOM scanners.

This module provides scanners for extracting components and their license
declarations from SBOM documents.
"""

from pathlib import Path

from sbom_attribution.scanners.base import BaseScanner
from sbom_attribution.scanners.cyclonedx import CycloneDXScanner

__all__ = [
    "BaseScanner",
    "CycloneDXScanner",
    "get_scanner",
]

# Registry of available scanners in priority order
_SCANNERS: list[type[BaseScanner]] = [
    CycloneDXScanner,
]


def get_scanner(path: Path) -> BaseScanner:
    """Get the appropriate scanner for a given SBOM file.

    Args:
        path: Path to the SBOM file.

    Returns:
        Scanner instance configured for the given file.

    Raises:
        ValueError: If no scanner can handle the given file.
    """
    for scanner_cls in _SCANNERS:
        if scanner_cls.can_handle(path):
            return scanner_cls(path)

    raise ValueError(
        f"No scanner available for '{path.name}'. "
        f"Supported files: *.cdx.json, *.cyclonedx.json, bom.json, sbom.json"
    )
