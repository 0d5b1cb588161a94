"""Tests for PollBackoff."""

from app.rates.backoff import PollBackoff


class TestPollBackoff:
    def test_interval_after_success(self):
        backoff = PollBackoff(6.0, jitter=0)
        assert backoff.next_delay() == 6.0

    def test_doubles_per_failure(self):
        """Test exponential growth on consecutive failures."""
        backoff = PollBackoff(5.0, max_delay=100.0, jitter=0)
        delays = []
        for _ in range(3):
            backoff.failure()
            delays.append(backoff.next_delay())
        assert delays == [10.0, 20.0, 40.0]

    def test_capped(self):
        backoff = PollBackoff(6.0, max_delay=30.0, jitter=0)
        for _ in range(10):
            backoff.failure()
        assert backoff.next_delay() == 30.0

    def test_reset_on_success(self):
        backoff = PollBackoff(6.0, jitter=0)
        backoff.failure()
        backoff.failure()
        backoff.success()
        assert backoff.failures == 0
        assert backoff.next_delay() == 6.0

    def test_jitter_bounds(self):
        """Test that jittered delays stay within +/-25% and never below the interval."""
        backoff = PollBackoff(4.0, max_delay=100.0, jitter=0.25)
        backoff.failure()
        for _ in range(200):
            delay = backoff.next_delay()
            assert 6.0 <= delay <= 10.0

    def test_max_delay_not_below_interval(self):
        backoff = PollBackoff(10.0, max_delay=1.0, jitter=0)
        backoff.failure()
        assert backoff.next_delay() == 10.0
