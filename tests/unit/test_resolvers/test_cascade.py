"""Unit tests for the cascading LicenseTextResolver."""

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from aioresponses import aioresponses

from sbom_attribution.models import LicenseText
from sbom_attribution.resolvers.base import BaseTextSource
from sbom_attribution.resolvers.cascade import LicenseTextResolver
from sbom_attribution.resolvers.local import CachedTextSource, CustomTextSource
from sbom_attribution.resolvers.spdx import SPDXTextSource


@pytest.fixture
async def resolver(text_cache, custom_dir) -> AsyncGenerator[LicenseTextResolver, None]:
    """Return a LicenseTextResolver over temporary directories."""
    async with LicenseTextResolver(cache=text_cache, custom_dir=custom_dir) as r:
        yield r


async def test_default_cascade_order(resolver):
    """Test that sources are ordered cache, custom, SPDX."""
    assert [type(s) for s in resolver.sources] == [
        CachedTextSource,
        CustomTextSource,
        SPDXTextSource,
    ]


async def test_cache_hit_skips_network(resolver, text_cache):
    """Test that a populated cache is served without any request."""
    text_cache.set("MIT", "cached MIT text")

    # No URLs registered: any request would fail
    with aioresponses() as mock:
        result = await resolver.resolve("MIT")
        assert not mock.requests

    assert result.text == "cached MIT text"
    assert result.source == "cache"


async def test_spdx_text_is_cached(resolver, text_cache, spdx_base_url):
    """Test that a fetched text is persisted and reused."""
    with aioresponses() as mock:
        mock.get(f"{spdx_base_url}/text/Apache-2.0.txt", body="Apache License 2.0 text")
        first = await resolver.resolve("Apache-2.0")

    assert first.source == "SPDX"
    assert text_cache.get("Apache-2.0") == "Apache License 2.0 text"

    with aioresponses():
        second = await resolver.resolve("Apache-2.0")

    assert second.source == "cache"
    assert second.text == first.text


async def test_fetch_failure_is_cached(resolver, text_cache, spdx_base_url):
    """Test that a failed fetch is cached so reruns are deterministic."""
    with aioresponses() as mock:
        mock.get(f"{spdx_base_url}/text/Bogus-1.0.txt", status=500)
        first = await resolver.resolve("Bogus-1.0")

    assert first.is_placeholder is True
    assert text_cache.get("Bogus-1.0") == first.text

    with aioresponses() as mock:
        mock.get(f"{spdx_base_url}/text/Bogus-1.0.txt", body="now available")
        second = await resolver.resolve("Bogus-1.0")

    assert second.text == first.text
    assert second.is_placeholder is True


async def test_missing_custom_text_cached(resolver, text_cache, custom_dir):
    """Test the missing LicenseRef text scenario across two resolutions."""
    first = await resolver.resolve("LicenseRef-Acme-EULA")

    expected_path = str(custom_dir / "LicenseRef-Acme-EULA.txt")
    assert expected_path in first.text
    assert first.is_placeholder is True

    # The store is not re-checked once the diagnostic is cached
    (custom_dir / "LicenseRef-Acme-EULA.txt").write_text("Acme EULA terms")
    second = await resolver.resolve("LicenseRef-Acme-EULA")

    assert second.text == first.text
    assert second.source == "cache"
    assert second.is_placeholder is True


async def test_custom_text_cached(resolver, text_cache, custom_dir):
    """Test that a custom text is copied into the cache."""
    (custom_dir / "LicenseRef-Acme-EULA.txt").write_text("Acme EULA terms")
    result = await resolver.resolve("LicenseRef-Acme-EULA")

    assert result.source == "custom"
    assert text_cache.get("LicenseRef-Acme-EULA") == "Acme EULA terms"


async def test_resolve_batch(resolver, text_cache, spdx_base_url):
    """Test concurrent resolution of several ids."""
    text_cache.set("MIT", "cached MIT text")
    with aioresponses() as mock:
        mock.get(f"{spdx_base_url}/text/ISC.txt", body="ISC text")
        results = await resolver.resolve_batch(["MIT", "ISC", "LicenseRef-X", "MIT"])

    assert set(results) == {"MIT", "ISC", "LicenseRef-X"}
    assert results["MIT"].text == "cached MIT text"
    assert results["ISC"].text == "ISC text"
    assert results["LicenseRef-X"].is_placeholder is True


async def test_custom_sources_priority(text_cache, custom_dir):
    """Test that custom sources are sorted by priority and None defers."""
    declining = MagicMock(spec=BaseTextSource)
    declining.priority = 10
    declining.name = "declining"
    declining.persist = True
    declining.resolve = AsyncMock(return_value=None)

    answering = MagicMock(spec=BaseTextSource)
    answering.priority = 20
    answering.name = "answering"
    answering.persist = False
    answering.resolve = AsyncMock(return_value=LicenseText(text="t", source="answering"))

    resolver = LicenseTextResolver(
        cache=text_cache, custom_dir=custom_dir, sources=[answering, declining]
    )
    result = await resolver.resolve("MIT")

    assert resolver.sources == [declining, answering]
    declining.resolve.assert_awaited_once_with("MIT")
    assert result.text == "t"
    # Non-persisting source: nothing written
    assert text_cache.get("MIT") is None
    await resolver.close()


async def test_no_source_resolves(text_cache, custom_dir):
    """Test the fallback when every source declines."""
    resolver = LicenseTextResolver(cache=text_cache, custom_dir=custom_dir, sources=[])
    result = await resolver.resolve("MIT")

    assert result.is_placeholder is True
    assert "MIT" in result.text
    await resolver.close()


async def test_undecodable_custom_text_does_not_fail_batch(resolver, custom_dir):
    """Test that a non-UTF-8 custom file still resolves alongside other ids."""
    (custom_dir / "LicenseRef-Acme.txt").write_bytes(b"Acme \xff\xfe terms")

    results = await resolver.resolve_batch(["LicenseRef-Acme", "LicenseRef-Other"])

    assert results["LicenseRef-Acme"].text == "Acme \ufffd\ufffd terms"
    assert results["LicenseRef-Acme"].is_placeholder is False
    assert results["LicenseRef-Other"].is_placeholder is True


async def test_undecodable_cached_text_is_served(resolver, text_cache):
    """Test that a non-UTF-8 cache file is served instead of raising."""
    text_cache.path_for("MIT").parent.mkdir(parents=True)
    text_cache.path_for("MIT").write_bytes(b"MIT \xff License")

    result = await resolver.resolve("MIT")

    assert result.source == "cache"
    assert result.text == "MIT \ufffd License"


async def test_path_like_id_never_leaves_cache_directory(resolver, text_cache, tmp_path):
    """Test that an id with path separators touches no file and no URL."""
    with aioresponses() as mock:
        result = await resolver.resolve("../../escaped")
        assert not mock.requests

    assert result.is_placeholder is True
    assert result.text == "Invalid license identifier: ../../escaped"
    assert not (tmp_path / "escaped.txt").exists()
    assert not text_cache.directory.exists()


async def test_empty_spdx_body_is_cached_as_diagnostic(resolver, text_cache, spdx_base_url):
    """Test that an empty 200 response is not shipped as license text."""
    with aioresponses() as mock:
        mock.get(f"{spdx_base_url}/text/MIT.txt", body="")
        result = await resolver.resolve("MIT")

    assert result.is_placeholder is True
    assert "Empty response body" in result.text
    assert text_cache.get("MIT") == result.text
