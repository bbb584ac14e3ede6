"""Bundled Jinja2 templates for the attribution reporters."""
