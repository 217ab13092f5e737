"""Tests for batch selection."""

import unittest

from sitemap_digest.core.batch_selector import select
from sitemap_digest.models.progress import ProgressRecord


def _feeds(count):
    return [f"https://site{i}.example/sitemap.xml" for i in range(count)]


class TestBatchSelector(unittest.TestCase):
    """Test cases for select()."""

    def test_full_cycle_visits_every_feed_once(self):
        """Repeated passes from index 0 cover [0, L) exactly once before wrapping."""
        for length in range(1, 13):
            for batch_size in range(1, 15):
                feeds = _feeds(length)
                cursor = ProgressRecord(last_index=0)
                visited = []

                for _ in range(length + 1):
                    selection = select(feeds, cursor, batch_size)
                    visited.extend(range(selection.start_index, selection.end_index))
                    cursor = ProgressRecord(last_index=selection.next_index)
                    if selection.next_index == 0:
                        break

                self.assertEqual(visited, list(range(length)), f"L={length} B={batch_size}")

    def test_middle_slice(self):
        feeds = _feeds(10)
        selection = select(feeds, ProgressRecord(last_index=3), 4)

        self.assertEqual(selection.feeds, feeds[3:7])
        self.assertEqual(selection.start_index, 3)
        self.assertEqual(selection.end_index, 7)
        self.assertEqual(selection.next_index, 7)
        self.assertEqual(selection.total, 10)

    def test_tail_slice_wraps_to_zero(self):
        feeds = _feeds(10)
        selection = select(feeds, ProgressRecord(last_index=8), 4)

        self.assertEqual(selection.feeds, feeds[8:10])
        self.assertEqual(selection.next_index, 0)

    def test_stale_cursor_restarts_from_zero(self):
        """A cursor past the end of a shrunken list starts again at 0."""
        feeds = _feeds(5)
        for last_index in (5, 6, 100):
            selection = select(feeds, ProgressRecord(last_index=last_index), 2)
            self.assertEqual(selection.start_index, 0)
            self.assertEqual(selection.feeds, feeds[0:2])
            self.assertEqual(selection.next_index, 2)

    def test_empty_feed_list(self):
        selection = select([], ProgressRecord(last_index=7), 25)

        self.assertEqual(selection.feeds, [])
        self.assertEqual(selection.next_index, 0)
        self.assertEqual(selection.total, 0)

    def test_batch_larger_than_list_processes_everything(self):
        feeds = _feeds(3)
        selection = select(feeds, ProgressRecord(last_index=0), 25)

        self.assertEqual(selection.feeds, feeds)
        self.assertEqual(selection.next_index, 0)

    def test_non_positive_batch_size_rejected(self):
        with self.assertRaises(ValueError):
            select(_feeds(3), ProgressRecord(), 0)


if __name__ == "__main__":
    unittest.main()
