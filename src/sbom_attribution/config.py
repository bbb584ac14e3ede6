"""Run configuration for attribution generation.

Settings come from built-in defaults, optionally overridden by the
``[attribution]`` table of a TOML file, and finally by command-line
options.
"""

import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from sbom_attribution.resolvers.spdx import DEFAULT_SPDX_VERSION

CONFIG_TABLE = "attribution"

DEFAULT_IGNORE_PATTERNS = (r"(?i)@[^@]*use\.local\b",)

_PATH_FIELDS = {
    "sbom_path",
    "license_map_path",
    "out_dir",
    "licenses_dir",
    "custom_licenses_dir",
    "html_template",
    "notice_template",
}


@dataclass(frozen=True)
class Settings:
    """Paths and options for one attribution run.

    Attributes:
        sbom_path: CycloneDX JSON SBOM to read.
        license_map_path: JSON override map from raw expression to license id.
        out_dir: Directory receiving THIRD_PARTY_LICENSES.html and NOTICE.md.
        licenses_dir: License text cache, shipped alongside the report.
        custom_licenses_dir: Texts for ``LicenseRef-`` identifiers.
        spdx_version: Pinned release tag of spdx/license-list-data.
        ignore_patterns: Regular expressions of package URLs to leave out.
        html_template: Optional custom template for the HTML report.
        notice_template: Optional custom template for the NOTICE file.
    """

    sbom_path: Path = Path("compliance/sbom/sbom.cdx.json")
    license_map_path: Path = Path("compliance/config/license-map.json")
    out_dir: Path = Path("third_party")
    licenses_dir: Path = Path("third_party/licenses")
    custom_licenses_dir: Path = Path("compliance/custom-license-texts")
    spdx_version: str = DEFAULT_SPDX_VERSION
    ignore_patterns: tuple[str, ...] = field(default=DEFAULT_IGNORE_PATTERNS)
    html_template: Optional[Path] = None
    notice_template: Optional[Path] = None

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **_coerce(values))


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Convert raw values to the field types of Settings."""
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")

    coerced: dict[str, Any] = {}
    for key, value in values.items():
        if key in _PATH_FIELDS:
            coerced[key] = Path(value)
        elif key == "ignore_patterns":
            if isinstance(value, str) or not all(isinstance(v, str) for v in value):
                raise ValueError("ignore_patterns must be a list of strings")
            coerced[key] = tuple(value)
        elif key == "spdx_version":
            coerced[key] = str(value)
        else:
            coerced[key] = value
    return coerced


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a TOML file.

    Relative paths in the file are taken as-is, i.e. relative to the
    working directory of the run.

    Args:
        path: TOML file with an ``[attribution]`` table. If None, the
            defaults are returned.

    Returns:
        Settings with file values applied over the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the TOML is invalid or contains unknown keys.
    """
    settings = Settings()
    if path is None:
        return settings

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"[{CONFIG_TABLE}] in {path} must be a table")

    return replace(settings, **_coerce(table))
