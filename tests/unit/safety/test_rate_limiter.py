"""
Tests for RateLimitGovernor.
"""
import pytest

from comment_overkill.safety.rate_limiter import RateLimitGovernor, ThrottleSignal
from comment_overkill.utils.state_manager import RateLimitStore
from tests.unit.fixtures.fakes import FakeClock, InstantToken


@pytest.mark.unit
class TestInit:
    """Test RateLimitGovernor.__init__() validation and defaults."""

    def test_defaults_from_settings(self, fake_clock):
        governor = RateLimitGovernor(clock=fake_clock)

        assert governor.base_wait == 60.0
        assert governor.max_wait == 1800.0
        assert governor.poll_interval == 5.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"base_wait": 0},
            {"base_wait": 0.0},
            {"poll_interval": 0},
            {"base_wait": 60, "max_wait": 30},
        ],
    )
    def test_explicit_values_are_not_replaced(self, fake_clock, kwargs):
        """Test zero or inconsistent values are rejected instead of defaulted."""
        with pytest.raises(ValueError):
            RateLimitGovernor(clock=fake_clock, **kwargs)

    def test_max_wait_equal_to_base(self, fake_clock):
        governor = RateLimitGovernor(base_wait=60, max_wait=60, clock=fake_clock)

        governor.observe(ThrottleSignal.THROTTLED)
        governor.observe(ThrottleSignal.THROTTLED)

        assert governor.state.wait == 60


@pytest.mark.unit
class TestObserve:
    """Test RateLimitGovernor.observe()."""

    def test_first_throttle_waits_base(self, governor, fake_clock):
        """Test first throttling signal locks in the base wait."""
        governor.observe(ThrottleSignal.THROTTLED)

        assert governor.state.active is True
        assert governor.state.wait == 60
        assert governor.state.last_triggered_at == fake_clock.now
        assert governor.state.multiplier == 2

    def test_two_signals_one_second_apart(self, governor, fake_clock):
        """Test second signal waits min(base * 2, max) from its own timestamp."""
        governor.observe(ThrottleSignal.THROTTLED)
        fake_clock.advance(1)
        second_at = fake_clock.now
        governor.observe(ThrottleSignal.THROTTLED)

        assert governor.state.wait == 120
        assert governor.state.last_triggered_at == second_at

        fake_clock.advance(119)
        assert governor.is_limited() is True
        fake_clock.advance(1)
        assert governor.is_limited() is False

    def test_multiplier_strictly_increases_until_cap(self, governor):
        """Test consecutive signals increase the multiplier, capped at max/base."""
        multipliers = []
        for _ in range(8):
            governor.observe(ThrottleSignal.THROTTLED)
            multipliers.append(governor.state.multiplier)

        cap = 1800 / 60
        increasing = [m for m in multipliers if m < cap]
        assert increasing == sorted(set(increasing))
        assert max(multipliers) == cap
        assert governor.state.wait <= 1800

    def test_wait_never_exceeds_max(self, governor):
        """Test effective wait is capped at max_wait."""
        for _ in range(20):
            governor.observe(ThrottleSignal.THROTTLED)

        assert governor.state.wait == 1800
        assert governor.effective_wait() == 1800

    def test_success_resets_multiplier(self, governor):
        """Test a success resets the multiplier to 1 without clearing the window."""
        governor.observe(ThrottleSignal.THROTTLED)
        governor.observe(ThrottleSignal.THROTTLED)

        governor.observe(ThrottleSignal.SUCCESS)

        assert governor.state.multiplier == 1
        assert governor.state.active is True

    def test_success_without_throttle_is_noop(self, governor):
        """Test success on a fresh governor changes nothing."""
        governor.observe(ThrottleSignal.SUCCESS)

        assert governor.state.multiplier == 1
        assert governor.state.active is False

    def test_throttle_count(self, governor):
        """Test throttle_count counts throttling signals."""
        governor.observe(ThrottleSignal.THROTTLED)
        governor.observe(ThrottleSignal.SUCCESS)
        governor.observe(ThrottleSignal.THROTTLED)

        assert governor.throttle_count == 2


@pytest.mark.unit
class TestObserveStatus:
    """Test RateLimitGovernor.observe_status()."""

    def test_429_is_throttled(self, governor):
        """Test HTTP 429 is a throttling signal."""
        governor.observe_status(429)

        assert governor.state.active is True

    @pytest.mark.parametrize("status", [200, 302, 404, 500])
    def test_other_status_is_success(self, governor, status):
        """Test other statuses reset the multiplier."""
        governor.observe_status(429)
        governor.observe_status(status)

        assert governor.state.multiplier == 1


@pytest.mark.unit
class TestGate:
    """Test RateLimitGovernor.gate()."""

    def test_gate_passes_when_not_limited(self, governor, instant_token):
        """Test gate returns immediately without throttling."""
        assert governor.gate(instant_token) is True
        assert instant_token.sleeps == []

    def test_gate_polls_until_window_elapses(self, governor, fake_clock, instant_token):
        """Test gate polls every poll_interval until the wait has elapsed."""
        governor.observe(ThrottleSignal.THROTTLED)

        assert governor.gate(instant_token) is True
        assert instant_token.sleeps == [5] * 12
        assert governor.state.active is False

    def test_gate_returns_false_when_cancelled(self, governor, fake_clock):
        """Test a cancelled token ends the wait early."""
        token = InstantToken(fake_clock, cancel_after_sleeps=2)
        governor.observe(ThrottleSignal.THROTTLED)

        assert governor.gate(token) is False
        assert len(token.sleeps) == 2

    def test_gate_reports_status(self, fake_clock, instant_token):
        """Test on_status receives waiting and cleared statuses."""
        statuses = []
        governor = RateLimitGovernor(
            base_wait=60, max_wait=1800, poll_interval=30, clock=fake_clock, on_status=statuses.append
        )
        governor.observe(ThrottleSignal.THROTTLED)
        governor.gate(instant_token)

        assert statuses[0] == "Active - 60s backoff"
        assert "Active - waiting..." in statuses
        assert statuses[-1] == ""


@pytest.mark.unit
class TestPersistence:
    """Test snapshot/restore through RateLimitStore."""

    def test_restore_open_window(self, tmp_path):
        """Test a new governor restores a still-open window from the store."""
        clock = FakeClock()
        store = RateLimitStore(tmp_path / "rate_limit.json")
        first = RateLimitGovernor(base_wait=60, max_wait=1800, poll_interval=5, clock=clock, store=store)
        first.observe(ThrottleSignal.THROTTLED)

        clock.advance(20)
        second = RateLimitGovernor(base_wait=60, max_wait=1800, poll_interval=5, clock=clock, store=store)

        assert second.is_limited() is True
        assert second.remaining_wait() == pytest.approx(40)
        assert second.state.multiplier == 2

    def test_elapsed_window_not_restored(self, tmp_path):
        """Test an elapsed window is ignored on restart."""
        clock = FakeClock()
        store = RateLimitStore(tmp_path / "rate_limit.json")
        first = RateLimitGovernor(base_wait=60, max_wait=1800, poll_interval=5, clock=clock, store=store)
        first.observe(ThrottleSignal.THROTTLED)

        clock.advance(61)
        second = RateLimitGovernor(base_wait=60, max_wait=1800, poll_interval=5, clock=clock, store=store)

        assert second.is_limited() is False
        assert second.state.multiplier == 1

    def test_restore_invalid_snapshot(self, governor):
        """Test invalid snapshots are rejected."""
        assert governor.restore({"active": True}) is False
        assert governor.restore({"active": "x", "last_triggered_at": "y", "multiplier": 1, "wait": 1}) is False

    def test_restore_clamps_multiplier(self, governor, fake_clock):
        """Test restored multiplier is clamped to the configured cap."""
        restored = governor.restore(
            {"active": True, "last_triggered_at": fake_clock.now, "multiplier": 1000, "wait": 60}
        )

        assert restored is True
        assert governor.state.multiplier == 30

    def test_get_stats(self, governor):
        """Test get_stats includes counters and bounds."""
        governor.observe(ThrottleSignal.THROTTLED)
        stats = governor.get_stats()

        assert stats["throttle_count"] == 1
        assert stats["base_wait"] == 60
        assert stats["max_wait"] == 1800
        assert stats["remaining_wait"] == pytest.approx(60)
