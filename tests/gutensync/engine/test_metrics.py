from gutensync.engine import metrics


class TestMetrics:
    def test_counts_events(self):
        metrics.log_event("embed_failed", url="https://example.com")
        metrics.log_event("embed_failed", url="https://example.org")
        metrics.log_event("block_skipped", block_id="b1")
        assert metrics.get_counts() == {"embed_failed": 2, "block_skipped": 1}

    def test_reset(self):
        metrics.log_event("block_skipped")
        metrics.reset()
        assert metrics.get_counts() == {}
