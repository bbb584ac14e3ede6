"""Component aggregation and license indexing.

Merges duplicate SBOM entries of the same package and groups the merged
packages by license identifier.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional

from sbom_attribution.models import Component, SbomComponent
from sbom_attribution.normalizer import normalize_license_ids
from sbom_attribution.purl import component_url_from_purl

logger = logging.getLogger(__name__)


class IgnoreRules:
    """Regular expressions matched against package URLs.

    A component whose package URL matches any pattern is left out of the
    report entirely. Components without a package URL are matched against
    the empty string.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        """Compile the ignore patterns.

        Args:
            patterns: Regular expressions searched anywhere in the purl.

        Raises:
            ValueError: If a pattern is not a valid regular expression.
        """
        self.patterns: list[re.Pattern[str]] = []
        for pattern in patterns:
            try:
                self.patterns.append(re.compile(pattern))
            except re.error as e:
                raise ValueError(f"Invalid ignore pattern {pattern!r}: {e}") from e

    def matches(self, purl: Optional[str]) -> bool:
        """Return True if the package URL should be ignored."""
        return any(p.search(purl or "") for p in self.patterns)


@dataclass
class LicenseIndex:
    """The two views built by aggregation.

    Attributes:
        by_license: License id -> components declaring it, sorted by
            name and version, each package at most once.
        by_purl: Identity key -> merged component.
    """

    by_license: dict[str, list[Component]] = field(default_factory=dict)
    by_purl: dict[str, Component] = field(default_factory=dict)


def identity_key(component: SbomComponent) -> str:
    """Return the identity key for a component.

    The package URL when present, otherwise "name@version" so that
    unrelated packages without a purl do not collapse into one record.
    """
    return component.purl or f"{component.name}@{component.version}"


def merge_components(existing: Component, incoming: Component) -> Component:
    """Merge two records for the same package into a new record.

    License ids are unioned and sorted. The first non-empty copyright is
    kept and never overwritten.
    """
    license_ids = tuple(sorted(set(existing.license_ids) | set(incoming.license_ids)))
    copyright = existing.copyright or incoming.copyright
    return replace(existing, license_ids=license_ids, copyright=copyright)


def build_index(
    components: Iterable[SbomComponent],
    license_map: Optional[Mapping[str, str]] = None,
    ignore: Optional[IgnoreRules] = None,
) -> LicenseIndex:
    """Normalize, merge and index SBOM components.

    Duplicate entries of one package are merged first; the by-license view
    is then derived from the fully merged records, so every entry reflects
    the final license set and copyright of its package.

    Args:
        components: Components as read from the SBOM.
        license_map: Overrides from raw expression string to license id.
        ignore: Rules for components to leave out.

    Returns:
        LicenseIndex with by-license and by-purl views.
    """
    index = LicenseIndex()
    ignored = 0

    for sbom_component in components:
        if ignore is not None and ignore.matches(sbom_component.purl):
            logger.debug("Ignoring component %s", sbom_component.purl)
            ignored += 1
            continue

        component = Component(
            name=sbom_component.name,
            version=sbom_component.version,
            purl=sbom_component.purl,
            url=component_url_from_purl(sbom_component.purl),
            license_ids=tuple(
                normalize_license_ids(sbom_component.licenses, license_map)
            ),
            copyright=sbom_component.copyright,
        )

        key = identity_key(sbom_component)
        existing = index.by_purl.get(key)
        if existing is None:
            index.by_purl[key] = component
        else:
            logger.debug("Merging duplicate entry for %s", key)
            index.by_purl[key] = merge_components(existing, component)

    for component in index.by_purl.values():
        for license_id in component.license_ids:
            index.by_license.setdefault(license_id, []).append(component)

    for used_by in index.by_license.values():
        used_by.sort(key=lambda c: c.sort_key)

    logger.info(
        "Indexed %d packages under %d licenses (%d ignored)",
        len(index.by_purl),
        len(index.by_license),
        ignored,
    )
    return index


def overview_ranking(index: LicenseIndex) -> list[tuple[str, int]]:
    """Rank license ids by number of packages using them.

    Returns:
        (license id, count) pairs, count descending, ties by id ascending.
    """
    counts = [(license_id, len(used_by)) for license_id, used_by in index.by_license.items()]
    return sorted(counts, key=lambda item: (-item[1], item[0]))
