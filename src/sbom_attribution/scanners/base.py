"""Common interface of the SBOM readers registered in ``scanners``."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from sbom_attribution.models import SbomComponent


class BaseScanner(ABC):
    """Reads one SBOM format into SbomComponent records."""

    def __init__(self, source_path: Optional[Path] = None) -> None:
        self.source_path = source_path

    @abstractmethod
    def scan(self) -> list[SbomComponent]:
        """Return the SBOM's components in document order.

        Raises:
            FileNotFoundError: If the SBOM file does not exist.
            ValueError: If the document is not valid for this format.
        """

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Return True if ``path`` looks like a document of this format."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Format label shown in verbose output, e.g. "CycloneDX JSON"."""
