"""Tests for the recent-search store"""

import shutil
import tempfile
from pathlib import Path

import msgpack
import pytest

from mindflow.search.recent_searches import RecentSearchStore


class TestRecentSearchStore:
    """Test suite for RecentSearchStore class"""

    def setup_method(self):
        """Set up test environment for each test"""
        self.temp_dir: Path = Path(tempfile.mkdtemp())  # pyright: ignore[reportUninitializedInstanceVariable]
        self.path: Path = self.temp_dir / "data" / "recent.msgpack"  # pyright: ignore[reportUninitializedInstanceVariable]

    def teardown_method(self):
        """Clean up after each test"""
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_empty_when_no_file(self):
        store = RecentSearchStore(self.path)
        assert store.list() == []

    def test_dedup_and_ordering(self):
        """Re-recording moves to the front, compared case-insensitively"""
        store = RecentSearchStore(self.path)

        store.record("stress")
        store.record("work")
        store.record("Stress")

        assert store.list() == ["Stress", "work"]

    def test_keywords_are_trimmed(self):
        store = RecentSearchStore(self.path)

        store.record("  deadline  ")
        store.record("deadline")

        assert store.list() == ["deadline"]

    def test_blank_keywords_are_ignored(self):
        store = RecentSearchStore(self.path)

        store.record("")
        store.record("   ")

        assert store.list() == []
        assert not self.path.exists()

    def test_capacity_evicts_oldest(self):
        store = RecentSearchStore(self.path, max_entries=3)

        for keyword in ["one", "two", "three", "four", "five"]:
            store.record(keyword)

        assert store.list() == ["five", "four", "three"]

    def test_never_exceeds_capacity(self):
        store = RecentSearchStore(self.path, max_entries=10)

        for index in range(50):
            store.record(f"keyword {index % 15}")
            assert len(store.list()) <= 10

    def test_persists_across_instances(self):
        store = RecentSearchStore(self.path)
        store.record("beach")
        store.record("work")

        reloaded = RecentSearchStore(self.path)

        assert reloaded.list() == ["work", "beach"]
        assert reloaded.entries()[0].last_used >= reloaded.entries()[1].last_used

    def test_clear(self):
        store = RecentSearchStore(self.path)
        store.record("beach")

        store.clear()

        assert store.list() == []
        assert RecentSearchStore(self.path).list() == []

    def test_no_temporary_file_left_behind(self):
        store = RecentSearchStore(self.path)
        store.record("beach")

        assert [p.name for p in self.path.parent.iterdir()] == [self.path.name]

    def test_corrupt_file_is_treated_as_empty(self):
        self.path.parent.mkdir(parents=True)
        _ = self.path.write_bytes(b"\xc1not msgpack")

        store = RecentSearchStore(self.path)

        assert store.list() == []
        store.record("beach")
        assert RecentSearchStore(self.path).list() == ["beach"]

    def test_unexpected_content_is_treated_as_empty(self):
        self.path.parent.mkdir(parents=True)
        _ = self.path.write_bytes(msgpack.packb([1, 2, 3]))

        assert RecentSearchStore(self.path).list() == []

    def test_smaller_capacity_trims_loaded_entries(self):
        store = RecentSearchStore(self.path)
        for keyword in ["a", "b", "c"]:
            store.record(keyword)

        assert RecentSearchStore(self.path, max_entries=2).list() == ["c", "b"]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            _ = RecentSearchStore(self.path, max_entries=0)
