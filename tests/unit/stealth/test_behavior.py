"""
Tests for randomized pacing helpers.
"""
import random

import pytest

from comment_overkill.stealth.behavior import draw_pause_interval, pause, random_delay
from tests.unit.fixtures.fakes import InstantToken


@pytest.mark.unit
class TestRandomDelay:
    def test_within_bounds(self, rng):
        delays = [random_delay((5, 30), rng) for _ in range(50)]

        assert all(5 <= d <= 30 for d in delays)

    def test_fixed_bounds(self):
        assert random_delay((2.0, 2.0)) == 2.0

    def test_never_negative(self):
        assert random_delay((-5, -1)) == 0.0

    def test_seeded_source_is_repeatable(self):
        assert random_delay((10, 15), random.Random(7)) == random_delay((10, 15), random.Random(7))


@pytest.mark.unit
class TestPause:
    def test_sleeps_drawn_delay(self, instant_token, rng):
        assert pause(instant_token, (10, 15), "Long pause", rng) is True

        assert len(instant_token.sleeps) == 1
        assert 10 <= instant_token.sleeps[0] <= 15

    def test_reports_cancellation(self):
        token = InstantToken(cancel_after_sleeps=1)

        assert pause(token, (5, 30)) is False


@pytest.mark.unit
class TestDrawPauseInterval:
    def test_within_bounds(self, rng):
        counts = {draw_pause_interval((10, 20), rng) for _ in range(200)}

        assert min(counts) >= 10
        assert max(counts) <= 20

    def test_at_least_one(self):
        assert draw_pause_interval((0, 0)) == 1
