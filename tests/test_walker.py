"""
Unit tests for the DirectoryCrawler.
"""

import os

import pytest
from photoprint.crawler import DirectoryCrawler, PathQueue


class CountingQueue(PathQueue):
    """PathQueue that records how often it was marked complete."""

    def __init__(self):
        super().__init__()
        self.complete_calls = 0

    def mark_complete(self):
        self.complete_calls += 1
        super().mark_complete()


def drain(queue):
    entries = []
    while True:
        entry, complete = queue.pop(timeout=5)
        if entry is None:
            assert complete
            return entries
        entries.append(entry)


class TestDirectoryCrawler:
    """Test crawling behaviour."""

    def test_recursive_finds_every_file(self, tree):
        root, expected = tree
        queue = CountingQueue()
        crawler = DirectoryCrawler(root, queue).start(recursive=True)
        entries = drain(queue)
        crawler.join()

        assert len(entries) == len(expected)
        assert set(entries) == expected
        assert all(os.path.isfile(e) for e in entries)
        assert crawler.files_found == len(expected)
        assert queue.complete_calls == 1

    def test_non_recursive_only_direct_children(self, tree):
        root, _ = tree
        crawler = DirectoryCrawler(root).start(recursive=False)
        entries = drain(crawler.queue)
        crawler.join()

        assert set(entries) == {str(root / "a.txt"), str(root / "b.jpg")}

    def test_entries_are_absolute(self, tree, monkeypatch):
        root, _ = tree
        monkeypatch.chdir(root.parent)
        crawler = DirectoryCrawler(root.name).start()
        entries = drain(crawler.queue)
        crawler.join()

        assert entries
        assert all(os.path.isabs(e) for e in entries)

    def test_empty_directory_completes(self, temp_dir):
        empty = temp_dir / "empty"
        empty.mkdir()
        queue = CountingQueue()
        crawler = DirectoryCrawler(empty, queue).start()
        crawler.join()

        assert queue.try_pop() == (None, True)
        assert queue.complete_calls == 1

    def test_missing_root_completes_with_error(self, temp_dir):
        queue = CountingQueue()
        crawler = DirectoryCrawler(temp_dir / "missing", queue).start()
        crawler.join()

        assert queue.try_pop() == (None, True)
        assert queue.complete_calls == 1
        assert crawler.files_found == 0
        assert len(crawler.errors) == 1

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission checks are bypassed for root",
    )
    def test_unreadable_subdirectory_is_skipped(self, tree):
        root, expected = tree
        locked = root / "one" / "two"
        os.chmod(locked, 0)
        try:
            crawler = DirectoryCrawler(root).start()
            entries = drain(crawler.queue)
            crawler.join()
        finally:
            os.chmod(locked, 0o755)

        assert set(entries) == {e for e in expected if str(locked) not in e}
        assert crawler.errors

    def test_start_twice_rejected(self, tree):
        root, _ = tree
        crawler = DirectoryCrawler(root).start()
        with pytest.raises(RuntimeError):
            crawler.start()
        crawler.join()
