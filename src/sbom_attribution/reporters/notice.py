"""Markdown reporter for the NOTICE file."""

from sbom_attribution.reporters.template import TemplateReporter


class NoticeReporter(TemplateReporter):
    """Renders NOTICE.md with the copyright attributions of all packages."""

    default_template = "notice.md.j2"

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_filename(self) -> str:
        return "NOTICE.md"
