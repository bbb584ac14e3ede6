"""HTML reporter for the third-party license listing."""

from sbom_attribution.reporters.template import TemplateReporter


class HtmlReporter(TemplateReporter):
    """Renders THIRD_PARTY_LICENSES.html.

    Output is autoescaped. Placeholder license texts are rendered in a
    highlighted block so they stand apart from genuine license texts.
    """

    default_template = "third_party_licenses.html.j2"
    autoescape = True

    @property
    def format_name(self) -> str:
        return "html"

    @property
    def default_filename(self) -> str:
        return "THIRD_PARTY_LICENSES.html"
