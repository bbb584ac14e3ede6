"""Core data models for sbom_attribution.

This module defines the records that flow through the attribution pipeline:
components read from an SBOM, merged package records, resolved license
texts, and the aggregated report handed to the reporters.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

UNKNOWN_LICENSE_PREFIX = "LicenseRef-UNKNOWN-"
CUSTOM_LICENSE_PREFIX = "LicenseRef-"

# SPDX idstring characters, optionally scoped by a DocumentRef- prefix
LICENSE_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9.+\-]*(?::[A-Za-z0-9][A-Za-z0-9.+\-]*)?")


def is_license_idstring(license_id: str) -> bool:
    """Return True if ``license_id`` is safe to use as a file name stem."""
    return bool(LICENSE_ID_PATTERN.fullmatch(license_id)) and ".." not in license_id


def is_custom_license_id(license_id: str) -> bool:
    """Return True for ``LicenseRef-`` ids, with or without a ``DocumentRef-`` scope."""
    return license_id.rpartition(":")[2].startswith(CUSTOM_LICENSE_PREFIX)


@dataclass(frozen=True)
class SbomComponent:
    """A component entry as read from the SBOM.

    Attributes:
        name: Package name.
        version: Package version string.
        purl: Package URL (e.g., "pkg:npm/left-pad@1.3.0"), if present.
        licenses: Raw license declarations, exactly as found in the SBOM.
        copyright: Optional copyright statement.
    """

    name: str
    version: str
    purl: Optional[str] = None
    licenses: tuple[Mapping[str, Any], ...] = ()
    copyright: Optional[str] = None


@dataclass(frozen=True)
class ExpressionNode:
    """Node of a parsed license expression.

    Leaves carry ``license``; internal nodes carry ``left`` and ``right``.
    Conjunction and disjunction are not recorded.
    """

    license: Optional[str] = None
    left: Optional["ExpressionNode"] = None
    right: Optional["ExpressionNode"] = None


@dataclass(frozen=True)
class Component:
    """A resolved package record.

    Frozen so that merging always produces a new record instead of
    mutating one already referenced by an index.

    Attributes:
        name: Package name.
        version: Package version.
        purl: Package URL, used as the identity key.
        url: Homepage derived from the purl, or None.
        license_ids: Sorted, unique canonical license identifiers.
        copyright: Optional copyright statement.
    """

    name: str
    version: str
    purl: Optional[str] = None
    url: Optional[str] = None
    license_ids: tuple[str, ...] = ()
    copyright: Optional[str] = None

    @property
    def sort_key(self) -> str:
        """Key used to order components by name and version."""
        return f"{self.name or ''}{self.version or ''}"


@dataclass(frozen=True)
class LicenseText:
    """Outcome of resolving the text of one license identifier.

    Attributes:
        text: License text, or a diagnostic message.
        source: Name of the step that produced the text (e.g., "cache").
        is_placeholder: True when ``text`` is a diagnostic, not a license.
    """

    text: str
    source: str
    is_placeholder: bool = False


@dataclass
class LicenseRecord:
    """One license section of the report."""

    id: str
    name: str
    text: str
    used_by: list[Component] = field(default_factory=list)
    is_placeholder: bool = False

    @property
    def is_unknown(self) -> bool:
        """True if the identifier is a synthesized unknown-license placeholder."""
        return self.id.startswith(UNKNOWN_LICENSE_PREFIX)


@dataclass(frozen=True)
class OverviewEntry:
    """License usage count for the report overview."""

    id: str
    name: str
    count: int


@dataclass
class AttributionReport:
    """Aggregated model rendered into the attribution documents.

    Attributes:
        generated_at: Timestamp of report assembly.
        overview: Licenses ranked by usage count, then identifier.
        licenses: License sections sorted by identifier.
        notices: Components carrying a copyright statement.
    """

    generated_at: datetime
    overview: list[OverviewEntry] = field(default_factory=list)
    licenses: list[LicenseRecord] = field(default_factory=list)
    notices: list[Component] = field(default_factory=list)

    @property
    def unknown_license_ids(self) -> list[str]:
        """Return identifiers synthesized for unrecognized expressions."""
        return [lic.id for lic in self.licenses if lic.is_unknown]
