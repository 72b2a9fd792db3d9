import json

from helpers import FailingGateway

from progression.infrastructure.storage.gateway import InMemoryGateway
from progression.infrastructure.streak import (
    StreakData,
    StreakDisplay,
    StreakTracker,
    compute_new_streak,
    describe_streak,
    streak_message,
)
from progression.infrastructure.streak.constants import STREAK_STORAGE_KEY


def _stored(gateway):
    return json.loads(gateway.get(STREAK_STORAGE_KEY))


def test_load_returns_zero_state_when_absent(gateway):
    assert StreakTracker(gateway).load() == StreakData.zero()


def test_load_returns_zero_state_when_malformed():
    payloads = [
        b"{not json",
        b"[1, 2, 3]",
        b'{"currentStreak": "many"}',
        b'{"currentStreak": 5, "lastSessionDate": "2024-01-10", "longestStreak": 2}',
        b'{"currentStreak": 1, "lastSessionDate": "last tuesday", "longestStreak": 1}',
        b'{"currentStreak": 5, "lastSessionDate": "2024-01- 9", "longestStreak": 5}',
        b"\xff\xfe",
    ]
    for payload in payloads:
        gateway = InMemoryGateway({STREAK_STORAGE_KEY: payload})
        assert StreakTracker(gateway).load() == StreakData.zero()


def test_load_survives_failing_gateway():
    assert StreakTracker(FailingGateway()).load() == StreakData.zero()


def test_first_session_starts_streak(gateway):
    state = StreakTracker(gateway).record_session("2024-01-10")
    assert state == StreakData(current_streak=1, last_session_date="2024-01-10", longest_streak=1)
    assert _stored(gateway) == {"currentStreak": 1, "lastSessionDate": "2024-01-10", "longestStreak": 1}


def test_consecutive_days_increment(gateway):
    tracker = StreakTracker(gateway)
    for day in ("2024-01-30", "2024-01-31", "2024-02-01"):
        state = tracker.record_session(day)
    assert state.current_streak == 3
    assert state.longest_streak == 3
    assert tracker.load() == state


def test_same_day_is_idempotent(gateway):
    tracker = StreakTracker(gateway)
    tracker.record_session("2024-01-09")
    first = tracker.record_session("2024-01-10")
    second = tracker.record_session("2024-01-10")
    assert first == second
    assert second.current_streak == 2


def test_same_day_does_not_write(gateway):
    writes = []

    class RecordingGateway(InMemoryGateway):
        def set(self, key, value):
            writes.append(key)
            return super().set(key, value)

    tracker = StreakTracker(RecordingGateway())
    tracker.record_session("2024-01-10")
    tracker.record_session("2024-01-10")
    assert writes == [STREAK_STORAGE_KEY]


def test_gap_resets_streak():
    start = StreakData(current_streak=5, last_session_date="2024-01-10", longest_streak=5)
    gateway = InMemoryGateway({STREAK_STORAGE_KEY: start.to_json()})
    state = StreakTracker(gateway).record_session("2024-01-13")
    assert state.current_streak == 1
    assert state.longest_streak == 5
    assert state.last_session_date == "2024-01-13"


def test_clock_moved_backwards_resets_streak():
    start = StreakData(current_streak=3, last_session_date="2024-01-10", longest_streak=4)
    state = compute_new_streak(start, "2024-01-08")
    assert state == StreakData(current_streak=1, last_session_date="2024-01-08", longest_streak=4)


def test_longest_streak_is_monotonic(gateway):
    tracker = StreakTracker(gateway)
    days = [
        "2024-01-01", "2024-01-02", "2024-01-03", "2024-01-03", "2024-01-07",
        "2024-01-08", "2024-01-20", "2024-01-21", "2024-01-22", "2024-01-23",
        "2024-01-24", "2024-02-01",
    ]
    previous_longest = 0
    for day in days:
        state = tracker.record_session(day)
        assert state.longest_streak >= previous_longest
        assert state.longest_streak >= state.current_streak
        previous_longest = state.longest_streak
    assert state.current_streak == 1
    assert state.longest_streak == 5


def test_streak_across_dst_transition(gateway):
    tracker = StreakTracker(gateway)
    for day in ("2024-03-09", "2024-03-10", "2024-03-11", "2024-11-02", "2024-11-03", "2024-11-04"):
        state = tracker.record_session(day)
    assert state.current_streak == 3
    assert state.longest_streak == 3


def test_write_failure_still_returns_computed_state():
    class ReadOnlyGateway(InMemoryGateway):
        def set(self, key, value):
            return False

    tracker = StreakTracker(ReadOnlyGateway())
    state = tracker.record_session("2024-01-10")
    assert state.current_streak == 1
    # next cold read sees the default
    assert tracker.load() == StreakData.zero()


def test_raising_gateway_never_propagates():
    state = StreakTracker(FailingGateway()).record_session("2024-01-10")
    assert state.current_streak == 1


def test_record_session_defaults_to_configured_today(gateway):
    tracker = StreakTracker(gateway)
    state = tracker.record_session()
    assert state.last_session_date == tracker.today()


def test_compute_new_streak_does_not_mutate_input():
    start = StreakData(current_streak=2, last_session_date="2024-01-09", longest_streak=2)
    compute_new_streak(start, "2024-01-10")
    assert start == StreakData(current_streak=2, last_session_date="2024-01-09", longest_streak=2)


def test_describe_streak_variants():
    today = "2024-01-10"
    assert describe_streak(StreakData.zero(), today) is StreakDisplay.ZERO
    done = StreakData(current_streak=3, last_session_date=today, longest_streak=3)
    assert describe_streak(done, today) is StreakDisplay.ACTIVE_TODAY
    pending = StreakData(current_streak=3, last_session_date="2024-01-09", longest_streak=3)
    assert describe_streak(pending, today) is StreakDisplay.ACTIVE_PENDING


def test_streak_message_text():
    today = "2024-01-10"
    assert streak_message(StreakData.zero(), today).main_text == "Start Your Streak"

    one = streak_message(StreakData(current_streak=1, last_session_date=today, longest_streak=1), today)
    assert one.main_text == "1 Day Streak"
    assert one.sub_text is None

    pending = streak_message(
        StreakData(current_streak=4, last_session_date="2024-01-09", longest_streak=4), today
    )
    assert pending.main_text == "4 Days Streak"
    assert pending.sub_text == "Don't break it!"
