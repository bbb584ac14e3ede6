"""Output reporters for generating attribution documents.

This module provides reporters for rendering the attribution report to
HTML and Markdown.
"""

from sbom_attribution.reporters.base import BaseReporter
from sbom_attribution.reporters.html import HtmlReporter
from sbom_attribution.reporters.notice import NoticeReporter
from sbom_attribution.reporters.template import TemplateReporter

__all__ = ["BaseReporter", "HtmlReporter", "NoticeReporter", "TemplateReporter"]
