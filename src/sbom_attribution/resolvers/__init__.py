"""License text resolvers.

This module provides the cascade that resolves license texts from the
local cache, custom license files and the SPDX license list.
"""

from sbom_attribution.resolvers.base import (
    BaseTextSource,
    CascadeResolverBase,
    is_placeholder_text,
)
from sbom_attribution.resolvers.cascade import LicenseTextResolver
from sbom_attribution.resolvers.local import CachedTextSource, CustomTextSource
from sbom_attribution.resolvers.spdx import (
    LicenseListError,
    SPDXLicenseData,
    SPDXTextSource,
)

__all__ = [
    "BaseTextSource",
    "CascadeResolverBase",
    "CachedTextSource",
    "CustomTextSource",
    "LicenseListError",
    "LicenseTextResolver",
    "SPDXLicenseData",
    "SPDXTextSource",
    "is_placeholder_text",
]
