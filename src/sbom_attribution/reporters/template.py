"""Jinja2-backed reporter base.

Loads either a bundled template from ``sbom_attribution.templates`` or a
custom template file, and renders the report model with it.
"""

from importlib.resources import files
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, Template

from sbom_attribution.models import AttributionReport
from sbom_attribution.reporters.base import BaseReporter


class TemplateReporter(BaseReporter):
    """Reporter that renders the report through a Jinja2 template.

    Subclasses name their bundled template and whether output is
    HTML-escaped.

    Attributes:
        template: The Jinja2 template to use for rendering.
    """

    default_template: str = ""
    autoescape: bool = False

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the bundled template.
        """
        if template_path:
            env = Environment(
                loader=FileSystemLoader(template_path.parent),
                autoescape=self.autoescape,
            )
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    def _load_default_template(self) -> Template:
        """Load the bundled Jinja2 template from package resources."""
        template_content = (
            files("sbom_attribution.templates")
            .joinpath(self.default_template)
            .read_text(encoding="utf-8")
        )
        env = Environment(autoescape=self.autoescape)
        return env.from_string(template_content)

    def render(self, report: AttributionReport) -> str:
        """Render the report with the template.

        The template receives ``overview``, ``licenses``, ``notices``,
        ``generated_at`` and ``unknown_license_ids``.
        """
        return self.template.render(
            overview=report.overview,
            licenses=report.licenses,
            notices=report.notices,
            generated_at=report.generated_at.isoformat(),
            unknown_license_ids=report.unknown_license_ids,
        )
