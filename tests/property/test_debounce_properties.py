"""
Property-based tests for the trailing debounce.

For any sequence of notifications, the quiet-period callback fires once per
gap that is at least the quiet period long, and each firing happens exactly
one quiet period after the last notification before it.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from treesync.application.sync import ChangeCoordinator


QUIET_MS = 300

# Gaps between consecutive notifications, in milliseconds
gaps = st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=30)


def expected_fire_times(offsets_ms: list[int]) -> list[int]:
    fires = []
    for current, following in zip(offsets_ms, offsets_ms[1:] + [None]):
        if following is None or following - current >= QUIET_MS:
            fires.append(current + QUIET_MS)
    return fires


class TestDebounceProperties:
    @settings(max_examples=200)
    @given(gaps)
    def test_fires_after_each_quiet_gap(self, make_scheduler, gap_list):
        scheduler = make_scheduler()
        fired_at = []
        coordinator = ChangeCoordinator(
            scheduler,
            on_quiet=lambda: fired_at.append(round(scheduler.now * 1000)),
            quiet_period_ms=QUIET_MS,
        )

        offsets = []
        now_ms = 0
        for gap in gap_list:
            now_ms += gap
            offsets.append(now_ms)

        clock_ms = 0
        for offset in offsets:
            scheduler.advance((offset - clock_ms) / 1000)
            clock_ms = offset
            coordinator.notify()
        scheduler.advance(QUIET_MS / 1000 + 1)

        assert fired_at == expected_fire_times(offsets)
        assert coordinator.notifications == len(offsets)
        assert not coordinator.pending

    @given(st.integers(min_value=1, max_value=50))
    def test_burst_collapses_to_one(self, make_scheduler, count):
        scheduler = make_scheduler()
        fired = []
        coordinator = ChangeCoordinator(scheduler, lambda: fired.append(1), quiet_period_ms=QUIET_MS)

        for _ in range(count):
            coordinator.notify()
        scheduler.advance(1.0)

        assert fired == [1]
        assert len(scheduler.scheduled) == count
