"""License declaration normalization.

Turns the raw license declarations of an SBOM component into a sorted,
deduplicated list of canonical license identifiers. Compound SPDX
expressions are flattened to their leaf identifiers, and anything that
cannot be parsed is kept visible under a deterministic placeholder id.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    LicenseWithExceptionSymbol,
    get_spdx_licensing,
)

from sbom_attribution.models import (
    UNKNOWN_LICENSE_PREFIX,
    ExpressionNode,
    is_license_idstring,
)

logger = logging.getLogger(__name__)

# SPDX licensing also maps deprecated GPL-family ids to their -only/-or-later
# forms through symbol aliases (GPL-2.0 -> GPL-2.0-only, GPL-2.0+ -> GPL-2.0-or-later)
SPDX = get_spdx_licensing()

LICENSE_REF_PATTERN = re.compile(
    r"(?:DocumentRef-[A-Za-z0-9.\-]+:)?LicenseRef-[A-Za-z0-9.\-]+"
)
NON_ALPHANUMERIC_RUN = re.compile(r"[^A-Za-z0-9]+")
UNKNOWN_SLUG_LENGTH = 40


def unknown_license_id(expression: str) -> str:
    """Build the placeholder identifier for an unrecognized expression.

    Args:
        expression: Raw license expression or free-text license name.

    Returns:
        "LicenseRef-UNKNOWN-" followed by the expression with runs of
        non-alphanumeric characters collapsed to "-", cut to 40 characters.
    """
    slug = NON_ALPHANUMERIC_RUN.sub("-", expression)[:UNKNOWN_SLUG_LENGTH]
    return f"{UNKNOWN_LICENSE_PREFIX}{slug}"


def _to_node(expression: Any) -> ExpressionNode:
    """Convert a parsed license-expression object into an ExpressionNode."""
    if isinstance(expression, LicenseWithExceptionSymbol):
        return ExpressionNode(license=expression.license_symbol.key)
    if isinstance(expression, LicenseSymbol):
        return ExpressionNode(license=expression.key)

    # AND/OR are n-ary in license-expression; fold into right-nested pairs
    children = [_to_node(arg) for arg in expression.args]
    node = children[-1]
    for child in reversed(children[:-1]):
        node = ExpressionNode(left=child, right=node)
    return node


def parse_expression(expression: str) -> Optional[ExpressionNode]:
    """Validate and parse an SPDX license expression.

    Symbols must be known SPDX identifiers or exceptions, or
    ``LicenseRef-`` custom identifiers (optionally ``DocumentRef-x:`` scoped).

    Args:
        expression: Raw expression such as "MIT OR (Apache-2.0 AND BSD-3-Clause)".

    Returns:
        Root ExpressionNode, or None if the expression is not valid.
    """
    try:
        parsed = SPDX.parse(expression, validate=False)
    except ExpressionError as e:
        logger.debug("Could not parse license expression %r: %s", expression, e)
        return None

    if parsed is None:
        return None

    unknown = [
        key
        for key in SPDX.unknown_license_keys(parsed)
        if not LICENSE_REF_PATTERN.fullmatch(key)
    ]
    if unknown:
        logger.debug(
            "Unknown license keys %s in expression %r", unknown, expression
        )
        return None

    return _to_node(parsed)


def collect_license_ids(node: Optional[ExpressionNode], ids: list[str]) -> None:
    """Append the leaf identifiers of an expression tree to ``ids``.

    Pre-order, left before right. Descent stops at the first node that
    carries a license.
    """
    if node is None:
        return
    if node.license:
        ids.append(node.license)
        return
    collect_license_ids(node.left, ids)
    collect_license_ids(node.right, ids)


def _raw_expression(declaration: Mapping[str, Any]) -> Optional[str]:
    """Return the expression or free-text name of a declaration, if any."""
    expression = declaration.get("expression")
    if expression:
        return expression
    license_info = declaration.get("license") or {}
    return license_info.get("name") or None


def normalize_license_ids(
    declarations: Optional[Iterable[Mapping[str, Any]]],
    license_map: Optional[Mapping[str, str]] = None,
) -> list[str]:
    """Normalize a component's license declarations to canonical identifiers.

    Each declaration is handled in order:

    1. ``{"license": {"id": ...}}`` is taken as-is, unless it is not a
       plain SPDX idstring, in which case it gets a placeholder (step 5).
    2. Otherwise the ``expression`` or ``license.name`` is used; declarations
       with neither contribute nothing.
    3. An exact match in ``license_map`` wins.
    4. A valid SPDX expression contributes all of its leaf identifiers.
    5. Anything else becomes a ``LicenseRef-UNKNOWN-`` placeholder.

    Args:
        declarations: Raw license declarations from the SBOM (may be None).
        license_map: Overrides from raw expression string to identifier.

    Returns:
        Sorted list of unique canonical license identifiers.
    """
    if not declarations:
        return []

    license_map = license_map or {}
    ids: list[str] = []

    for declaration in declarations:
        if not declaration:
            continue

        license_info = declaration.get("license") or {}
        declared_id = license_info.get("id")
        if declared_id:
            if is_license_idstring(declared_id):
                ids.append(declared_id)
            else:
                placeholder = unknown_license_id(declared_id)
                logger.warning(
                    "Malformed license id %r, using %s", declared_id, placeholder
                )
                ids.append(placeholder)
            continue

        expression = _raw_expression(declaration)
        if not expression:
            continue

        mapped = license_map.get(expression)
        if mapped:
            ids.append(mapped)
            continue

        node = parse_expression(expression)
        if node is not None:
            collect_license_ids(node, ids)
        else:
            placeholder = unknown_license_id(expression)
            logger.warning(
                "Unrecognized license expression %r, using %s", expression, placeholder
            )
            ids.append(placeholder)

    return sorted(set(ids))


def load_license_map(path: Path) -> dict[str, str]:
    """Load the override map from raw expression strings to license ids.

    Args:
        path: Path to a JSON object mapping strings to strings.

    Returns:
        The override mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON object of strings.
    """
    if not path.exists():
        raise FileNotFoundError(f"License map not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"License map {path} must be a JSON object")

    for key, value in data.items():
        if not isinstance(value, str) or not value:
            raise ValueError(
                f"License map entry {key!r} in {path} must map to a license id string"
            )

    return data
