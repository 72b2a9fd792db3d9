import json

import pytest
from pydantic import ValidationError

from helpers import FailingGateway, make_session

from progression.domains.session.constants import SESSIONS_KEY
from progression.domains.session.repository import SessionLogRepository, StartDateRepository
from progression.domains.session.schemas import ProtectionLevel, SessionRecord
from progression.domains.session.stats import (
    calculate_stats,
    format_total_time,
    get_rewire_day,
    history_streak,
)
from progression.domains.subscription.repository import SubscriptionRepository
from progression.infrastructure.storage.gateway import InMemoryGateway


def test_session_record_accepts_camel_case_json():
    record = SessionRecord.model_validate(
        {
            "id": "abc",
            "date": "2024-01-05",
            "timestamp": 1704412800000,
            "completed": True,
            "duration": 1200,
            "protectionLevel": "strict",
            "stillnessPercent": 91.5,
        }
    )
    assert record.duration_seconds == 1200
    assert record.protection_level is ProtectionLevel.STRICT
    assert record.metric("stillness_percent") == 91.5
    assert record.metric("blink_score") == 0.0
    assert not record.is_scored


def test_session_record_defaults_protection_level():
    record = make_session("2024-01-05")
    assert record.protection_level is ProtectionLevel.EASY


def test_session_record_validation():
    with pytest.raises(ValidationError):
        make_session("05/01/2024")
    with pytest.raises(ValidationError):
        make_session("2024-01- 5")
    with pytest.raises(ValidationError):
        make_session("2024-01-05", duration_seconds=-1)
    with pytest.raises(ValidationError):
        make_session("2024-01-05", protection_level="lenient")


def test_session_record_is_immutable():
    record = make_session("2024-01-05")
    with pytest.raises(ValidationError):
        record.completed = False


def test_session_log_append_and_read(gateway):
    repo = SessionLogRepository(gateway)
    assert repo.get_sessions() == []
    first = make_session("2024-01-01", dawg_score=80)
    second = make_session("2024-01-02")
    assert repo.save_session(first)
    assert repo.save_session(second)
    assert repo.get_sessions() == [first, second]
    stored = json.loads(gateway.get(SESSIONS_KEY))
    assert stored[0]["durationSeconds"] == 600
    assert stored[0]["dawgScore"] == 80
    assert "blinkScore" not in stored[0]


def test_session_log_tolerates_corruption():
    assert SessionLogRepository(InMemoryGateway({SESSIONS_KEY: b"{oops"})).get_sessions() == []
    assert SessionLogRepository(InMemoryGateway({SESSIONS_KEY: b'{"a": 1}'})).get_sessions() == []
    payload = json.dumps(
        [
            {"id": "ok", "date": "2024-01-01", "timestamp": 1, "completed": True, "duration": 60},
            {"id": "bad", "date": "not a day"},
            "garbage",
        ]
    ).encode()
    sessions = SessionLogRepository(InMemoryGateway({SESSIONS_KEY: payload})).get_sessions()
    assert [s.id for s in sessions] == ["ok"]


def test_session_log_failures_are_swallowed():
    repo = SessionLogRepository(FailingGateway())
    assert repo.get_sessions() == []
    assert repo.save_session(make_session("2024-01-01")) is False
    assert repo.clear_sessions() is False


def test_clear_sessions(gateway):
    repo = SessionLogRepository(gateway)
    repo.save_session(make_session("2024-01-01"))
    assert repo.clear_sessions()
    assert repo.get_sessions() == []


def test_calculate_stats_empty():
    stats = calculate_stats([], "2024-01-10")
    assert stats.total_sessions == 0
    assert stats.longest_session_seconds == 0
    assert stats.last_session_date is None
    assert stats.avg_stillness_percent is None


def test_calculate_stats_aggregates_completed_sessions():
    sessions = [
        make_session("2024-01-08", duration_seconds=600, timestamp=1, stillness_percent=80, blinks_count=12),
        make_session("2024-01-09", duration_seconds=1500, timestamp=2, stillness_percent=91),
        make_session("2024-01-10", duration_seconds=300, timestamp=3, blinks_count=3),
        make_session("2024-01-10", duration_seconds=9999, timestamp=4, completed=False),
    ]
    stats = calculate_stats(sessions, "2024-01-10")
    assert stats.total_sessions == 3
    assert stats.total_time_seconds == 2400
    assert stats.longest_session_seconds == 1500
    assert stats.current_streak == 3
    assert stats.last_session_date == "2024-01-10"
    assert stats.avg_stillness_percent == 86
    assert stats.total_blinks == 15


def test_history_streak():
    assert history_streak([], "2024-01-10") == 0
    assert history_streak(["2024-01-08", "2024-01-09"], "2024-01-10") == 2
    assert history_streak(["2024-01-07", "2024-01-08"], "2024-01-10") == 0
    assert history_streak(["2024-01-05", "2024-01-07", "2024-01-08", "2024-01-10"], "2024-01-10") == 1


def test_rewire_day_counts_unique_days_since_start():
    sessions = [
        make_session("2024-01-01"),
        make_session("2024-01-03"),
        make_session("2024-01-03"),
        make_session("2024-01-04", completed=False),
        make_session("2024-01-05"),
    ]
    assert get_rewire_day(sessions, "2024-01-02") == 2
    assert get_rewire_day(sessions, "2024-01-01") == 3


def test_start_date_defaults_to_earliest_completed_session(gateway):
    repo = StartDateRepository(gateway)
    sessions = [make_session("2024-01-05"), make_session("2024-01-02", completed=False), make_session("2024-01-03")]
    assert repo.ensure_start_date(sessions, "2024-02-01") == "2024-01-03"
    assert repo.ensure_start_date([], "2024-02-01") == "2024-01-03"
    assert StartDateRepository(InMemoryGateway()).ensure_start_date([], "2024-02-01") == "2024-02-01"


def test_format_total_time():
    assert format_total_time(9240) == "2h 34m"
    assert format_total_time(2700) == "45m"
    assert format_total_time(30) == "30s"


def test_subscription_flag(gateway):
    repo = SubscriptionRepository(gateway)
    assert repo.get_is_pro() is False
    assert repo.set_is_pro(True)
    assert repo.get_is_pro() is True
    repo.set_is_pro(False)
    assert repo.get_is_pro() is False
    assert SubscriptionRepository(FailingGateway()).get_is_pro() is False
