"""Assembly of the attribution report model.

Combines the license index, the SPDX display names and the resolved
license texts into the model handed to the reporters.
"""

import logging
from datetime import UTC, datetime
from typing import Mapping, Optional

from sbom_attribution.aggregator import LicenseIndex, overview_ranking
from sbom_attribution.models import (
    AttributionReport,
    LicenseRecord,
    LicenseText,
    OverviewEntry,
)
from sbom_attribution.resolvers.base import CascadeResolverBase

logger = logging.getLogger(__name__)


def build_report(
    index: LicenseIndex,
    names: Mapping[str, str],
    texts: Mapping[str, LicenseText],
    generated_at: Optional[datetime] = None,
) -> AttributionReport:
    """Build the report model from already resolved data.

    Args:
        index: Aggregated license index.
        names: SPDX license id -> display name. Missing ids use the id.
        texts: License id -> resolved text, for every id in the index.
        generated_at: Report timestamp, defaults to now (UTC).

    Returns:
        AttributionReport with overview, licenses and notices sorted for
        rendering.
    """
    licenses = []
    for license_id in sorted(index.by_license):
        text = texts[license_id]
        licenses.append(
            LicenseRecord(
                id=license_id,
                name=names.get(license_id, license_id),
                text=text.text,
                used_by=list(index.by_license[license_id]),
                is_placeholder=text.is_placeholder,
            )
        )

    overview = [
        OverviewEntry(id=license_id, name=names.get(license_id, license_id), count=count)
        for license_id, count in overview_ranking(index)
    ]

    notices = sorted(
        (c for c in index.by_purl.values() if c.copyright),
        key=lambda c: c.sort_key,
    )

    return AttributionReport(
        generated_at=generated_at or datetime.now(UTC),
        overview=overview,
        licenses=licenses,
        notices=notices,
    )


async def assemble_report(
    index: LicenseIndex,
    names: Mapping[str, str],
    resolver: CascadeResolverBase,
) -> AttributionReport:
    """Resolve the text of every indexed license and build the report.

    Args:
        index: Aggregated license index.
        names: SPDX license id -> display name.
        resolver: Text resolver used for every license id in the index.

    Returns:
        The assembled AttributionReport.
    """
    texts = await resolver.resolve_batch(sorted(index.by_license))
    report = build_report(index, names, texts)
    logger.info(
        "Assembled report: %d licenses, %d notices",
        len(report.licenses),
        len(report.notices),
    )
    return report
