"""
Tests for CancellationToken.
"""
import threading
import time

import pytest

from comment_overkill.utils.cancellation import CancellationToken


@pytest.mark.unit
class TestCancellationToken:
    def test_starts_active(self):
        token = CancellationToken()

        assert token.cancelled is False
        assert token.sleep(0) is True

    def test_cancel_is_idempotent(self):
        token = CancellationToken()

        token.cancel()
        token.cancel()

        assert token.cancelled is True

    def test_sleep_after_cancel_returns_immediately(self):
        token = CancellationToken()
        token.cancel()

        start = time.monotonic()
        assert token.sleep(30) is False
        assert time.monotonic() - start < 1

    def test_cancel_wakes_sleeping_thread(self):
        token = CancellationToken()
        results = []

        sleeper = threading.Thread(target=lambda: results.append(token.sleep(30)))
        sleeper.start()
        time.sleep(0.05)
        token.cancel()
        sleeper.join(timeout=5)

        assert not sleeper.is_alive()
        assert results == [False]

    def test_short_sleep_completes(self):
        token = CancellationToken()

        assert token.sleep(0.01) is True
