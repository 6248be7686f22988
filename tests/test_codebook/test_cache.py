"""Tests for CodebookCache."""

from __future__ import annotations

import threading
import time

import pytest

from palgatrans.codebook.cache import CodebookCache


class TestCodebookCache:
    def test_builds_once(self) -> None:
        cache = CodebookCache()
        calls: list[int] = []

        def build() -> str:
            calls.append(1)
            return "value"

        assert cache.get_or_build("k", build) == "value"
        assert cache.get_or_build("k", build) == "value"
        assert len(calls) == 1
        assert cache.has("k")
        assert len(cache) == 1

    def test_none_is_cached(self) -> None:
        cache = CodebookCache()
        calls: list[int] = []

        def build() -> None:
            calls.append(1)

        assert cache.get_or_build(("codebook", "x"), build) is None
        assert cache.get_or_build(("codebook", "x"), build) is None
        assert len(calls) == 1
        assert cache.has(("codebook", "x"))

    def test_failed_build_is_not_cached(self) -> None:
        cache = CodebookCache()

        def boom() -> str:
            raise RuntimeError("offline")

        with pytest.raises(RuntimeError):
            cache.get_or_build("k", boom)
        assert not cache.has("k")
        assert cache.get_or_build("k", lambda: "ok") == "ok"

    def test_get_keys_clear(self) -> None:
        cache = CodebookCache()
        cache.get_or_build("a", lambda: 1)
        assert cache.get("a") == 1
        assert cache.get("missing") is None
        assert cache.keys() == ["a"]
        cache.clear()
        assert len(cache) == 0

    def test_concurrent_builds_are_serialized(self) -> None:
        cache = CodebookCache()
        calls: list[int] = []

        def slow_build() -> str:
            calls.append(1)
            time.sleep(0.05)
            return "built"

        results: list[str] = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.get_or_build("k", slow_build)))
            for _ in range(5)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == ["built"] * 5
        assert len(calls) == 1
