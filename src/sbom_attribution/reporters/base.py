"""Base interface for output reporters.

Reporters render the assembled attribution report to a document format
(HTML, Markdown, ...).
"""

from abc import ABC, abstractmethod
from pathlib import Path

from sbom_attribution.models import AttributionReport


class BaseReporter(ABC):
    """Abstract base class for output reporters."""

    @abstractmethod
    def render(self, report: AttributionReport) -> str:
        """Render the report to formatted output.

        Args:
            report: Assembled attribution report.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, report: AttributionReport, output_path: Path) -> None:
        """Render and write output to a file.

        Parent directories are created as needed.

        Args:
            report: Assembled attribution report.
            output_path: Path to write the output file.
        """
        content = self.render(report)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            Format name like "html" or "markdown".
        """
        ...

    @property
    @abstractmethod
    def default_filename(self) -> str:
        """Return the default output file name for this reporter.

        Returns:
            File name like "NOTICE.md".
        """
        ...
