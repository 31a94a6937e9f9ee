import asyncio
import logging
import re

import pytest

from bang_app.exceptions import (
    DeletionFailure,
    GenerationFailure,
    InvalidUrl,
    LookupFailure,
    MissingKey,
    MissingParameter,
    MissingSlug,
    NotFound,
    PersistenceFailure,
    Unauthorized,
)
from bang_app.hits.strategies import BackgroundHitScheduler, InlineHitScheduler
from bang_app.services import generator, registry as registry_module
from bang_app.services.registry import RedirectRegistry
from tests.conftest import FailingRecordStore


SLUG_RE = re.compile(r"^![A-Za-z0-9]{5}$")
KEY_RE = re.compile(r"^[A-Za-z0-9]{64}$")


class TestCreate:
    """Creating redirects"""

    def test_create_returns_slug_and_key(self, registry, store):
        """Test that a new link gets a well-formed slug and admin key"""
        link = asyncio.run(registry.create("https://example.com"))

        assert SLUG_RE.match(link.slug)
        assert KEY_RE.match(link.key)

        stored = asyncio.run(store.lrange(link.slug))
        assert stored == ["https://example.com", link.key, "0"]

    def test_create_missing_url(self, registry):
        with pytest.raises(MissingParameter):
            asyncio.run(registry.create(None))
        with pytest.raises(MissingParameter):
            asyncio.run(registry.create(""))

    def test_create_invalid_url_stores_nothing(self, registry, store):
        """Test that ftp:// is rejected and no record is written"""
        with pytest.raises(InvalidUrl):
            asyncio.run(registry.create("ftp://example.com"))

        assert store._lists == {}

    def test_create_retries_on_collision(self, registry, store, monkeypatch):
        """Test that a taken slug is never overwritten"""
        asyncio.run(store.rpush("!taken", "https://first.com", "k" * 64, "7"))
        candidates = iter(["!taken", "!taken", "!fresh"])
        monkeypatch.setattr(registry_module, "generate_slug", lambda: next(candidates))

        link = asyncio.run(registry.create("https://second.com"))

        assert link.slug == "!fresh"
        assert asyncio.run(store.lrange("!taken")) == ["https://first.com", "k" * 64, "7"]

    def test_create_gives_up_after_max_retries(self, store, hits, monkeypatch):
        asyncio.run(store.rpush("!taken", "https://first.com", "k" * 64, "0"))
        monkeypatch.setattr(registry_module, "generate_slug", lambda: "!taken")
        registry = RedirectRegistry(store=store, hits=hits, max_retries=3)

        with pytest.raises(GenerationFailure):
            asyncio.run(registry.create("https://second.com"))

    def test_create_random_source_failure(self, registry, monkeypatch):
        def no_entropy(seq):
            raise OSError("getrandom failed")

        monkeypatch.setattr(generator.secrets, "choice", no_entropy)

        with pytest.raises(GenerationFailure):
            asyncio.run(registry.create("https://example.com"))

    def test_create_store_failure(self, hits):
        registry = RedirectRegistry(store=FailingRecordStore("rpush"), hits=hits)

        with pytest.raises(PersistenceFailure):
            asyncio.run(registry.create("https://example.com"))


class TestResolve:
    """Resolving slugs and counting clicks"""

    def test_create_then_resolve(self, registry, hits):
        """Test that resolve returns exactly the URL that was registered"""
        for url in ["https://example.com", "http://sub.domain-name.co.uk", "https://a.io"]:
            link = asyncio.run(registry.create(url))
            assert asyncio.run(registry.resolve(link.slug)) == url

        assert hits.scheduled == 3

    def test_resolve_counts_clicks(self, registry):
        link = asyncio.run(registry.create("https://example.com"))

        asyncio.run(registry.resolve(link.slug))
        asyncio.run(registry.resolve(link.slug))

        assert asyncio.run(registry.stats(link.slug, link.key)) == "2"

    def test_resolve_unknown_slug(self, registry, hits):
        """Test that a never-created slug is not found and nothing is counted"""
        with pytest.raises(NotFound):
            asyncio.run(registry.resolve("!nope0"))

        assert hits.scheduled == 0

    def test_resolve_missing_slug(self, registry):
        for slug in [None, "", "!"]:
            with pytest.raises(MissingSlug):
                asyncio.run(registry.resolve(slug))

    def test_resolve_store_failure_is_not_found(self, hits):
        registry = RedirectRegistry(store=FailingRecordStore("lindex"), hits=hits)

        with pytest.raises(NotFound):
            asyncio.run(registry.resolve("!abcde"))

    def test_increment_failure_is_only_logged(self, hits, caplog):
        """Test that a failed counter write never affects the redirect"""
        store = FailingRecordStore()
        registry = RedirectRegistry(store=store, hits=hits)
        link = asyncio.run(registry.create("https://example.com"))
        store.failing.add("lset")

        with caplog.at_level(logging.ERROR, logger="bang_app"):
            target = asyncio.run(registry.resolve(link.slug))

        assert target == "https://example.com"
        assert "Failed to increment click counter" in caplog.text
        assert link.key not in caplog.text

    def test_legacy_record_without_counter(self, registry, store):
        """Test that two-element records are read as 0 clicks and upgraded on first hit"""
        asyncio.run(store.rpush("!old00", "https://legacy.org", "L" * 64))

        assert asyncio.run(registry.stats("!old00", "L" * 64)) == "0"

        asyncio.run(registry.resolve("!old00"))

        assert asyncio.run(registry.stats("!old00", "L" * 64)) == "1"
        assert asyncio.run(store.lrange("!old00")) == ["https://legacy.org", "L" * 64, "1"]

    def test_background_increment_does_not_block(self, store):
        """Test that resolve returns before the increment has run"""
        async def scenario():
            hits = BackgroundHitScheduler()
            registry = RedirectRegistry(store=store, hits=hits)
            link = await registry.create("https://example.com")

            target = await registry.resolve(link.slug)
            pending_after_resolve = hits.pending
            clicks_after_resolve = await store.lindex(link.slug, 2)

            abandoned = await hits.drain(timeout=1)
            clicks = await registry.stats(link.slug, link.key)
            return target, pending_after_resolve, clicks_after_resolve, abandoned, clicks

        target, pending, early_clicks, abandoned, clicks = asyncio.run(scenario())

        assert target == "https://example.com"
        assert pending == 1
        assert early_clicks == "0"
        assert abandoned == 0
        assert clicks == "1"


class TestStats:
    """Reading click counters"""

    def test_stats_requires_correct_key(self, registry):
        """Test that a wrong key is rejected without revealing the counter"""
        link = asyncio.run(registry.create("https://example.com"))
        asyncio.run(registry.resolve(link.slug))

        with pytest.raises(Unauthorized) as exc_info:
            asyncio.run(registry.stats(link.slug, "x" * 64))

        assert "1" not in exc_info.value.detail

    def test_stats_unknown_slug_fails_closed(self, registry):
        with pytest.raises(Unauthorized):
            asyncio.run(registry.stats("!nope0", "x" * 64))

    def test_stats_missing_inputs(self, registry):
        with pytest.raises(MissingSlug):
            asyncio.run(registry.stats("!", "key"))
        with pytest.raises(MissingKey):
            asyncio.run(registry.stats("!abcde", None))
        with pytest.raises(MissingKey):
            asyncio.run(registry.stats("!abcde", ""))

    def test_stats_is_idempotent(self, registry):
        """Test that reading stats never changes the counter"""
        link = asyncio.run(registry.create("https://example.com"))
        asyncio.run(registry.resolve(link.slug))

        results = [asyncio.run(registry.stats(link.slug, link.key)) for _ in range(5)]

        assert results == ["1"] * 5

    def test_stats_store_failure(self, hits):
        registry = RedirectRegistry(store=FailingRecordStore("lrange"), hits=hits)

        with pytest.raises(LookupFailure):
            asyncio.run(registry.stats("!abcde", "key"))


class TestDelete:
    """Deleting redirects"""

    def test_delete_with_wrong_key_keeps_record(self, registry):
        link = asyncio.run(registry.create("https://example.com"))

        with pytest.raises(Unauthorized):
            asyncio.run(registry.delete(link.slug, "x" * 64))

        assert asyncio.run(registry.resolve(link.slug)) == "https://example.com"

    def test_delete_with_correct_key(self, registry, store):
        link = asyncio.run(registry.create("https://example.com"))

        asyncio.run(registry.delete(link.slug, link.key))

        assert not asyncio.run(store.exists(link.slug))
        with pytest.raises(NotFound):
            asyncio.run(registry.resolve(link.slug))

    def test_deleted_is_same_as_absent(self, registry):
        link = asyncio.run(registry.create("https://example.com"))
        asyncio.run(registry.delete(link.slug, link.key))

        with pytest.raises(NotFound):
            asyncio.run(registry.delete(link.slug, link.key))
        with pytest.raises(Unauthorized):
            asyncio.run(registry.stats(link.slug, link.key))

    def test_delete_missing_inputs(self, registry):
        with pytest.raises(MissingSlug):
            asyncio.run(registry.delete("", "key"))
        with pytest.raises(MissingKey):
            asyncio.run(registry.delete("!abcde", None))

    def test_delete_unknown_slug(self, registry):
        with pytest.raises(NotFound):
            asyncio.run(registry.delete("!nope0", "x" * 64))

    def test_delete_store_failure(self):
        store = FailingRecordStore()
        registry = RedirectRegistry(store=store, hits=InlineHitScheduler())
        link = asyncio.run(registry.create("https://example.com"))
        store.failing.add("delete")

        with pytest.raises(DeletionFailure):
            asyncio.run(registry.delete(link.slug, link.key))

        assert asyncio.run(registry.resolve(link.slug)) == "https://example.com"


def test_full_scenario(registry):
    """Create, resolve, stats, failed delete, delete, resolve"""
    link = asyncio.run(registry.create("https://example.com"))
    assert SLUG_RE.match(link.slug)
    assert KEY_RE.match(link.key)

    assert asyncio.run(registry.resolve(link.slug)) == "https://example.com"
    assert asyncio.run(registry.stats(link.slug, link.key)) == "1"

    with pytest.raises(Unauthorized):
        asyncio.run(registry.delete(link.slug, "wrong"))
    assert asyncio.run(registry.resolve(link.slug)) == "https://example.com"

    asyncio.run(registry.delete(link.slug, link.key))
    with pytest.raises(NotFound):
        asyncio.run(registry.resolve(link.slug))
