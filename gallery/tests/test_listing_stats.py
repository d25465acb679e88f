"""Tests for ListingStats class."""

import time

from gallery.listing_stats import ListingStats


class TestListingStats:
    """Tests for ListingStats class."""

    def test_elapsed_seconds(self):
        stats = ListingStats()
        stats.start_time = time.time() - 10

        assert 10 <= stats.elapsed_seconds < 12

    def test_record_counters(self):
        stats = ListingStats()

        stats.record_hit()
        stats.record_generated(500)
        stats.record_generated(300)
        stats.record_error('photos/x.jpg: boom')

        assert stats.cache_hits == 1
        assert stats.generated == 2
        assert stats.bytes_generated == 800
        assert stats.errors == 1
        assert stats.error_details == ['photos/x.jpg: boom']
        assert stats.completed_count == 4

    def test_skipped(self):
        stats = ListingStats(scanned=10, eligible=7)

        assert stats.skipped == 3

    def test_hit_rate(self):
        stats = ListingStats(cache_hits=3, generated=1)

        assert stats.hit_rate == 0.75

    def test_hit_rate_empty(self):
        assert ListingStats().hit_rate == 0.0
