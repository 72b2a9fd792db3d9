from helpers import FailingGateway, make_session

from progression.domains.subscription.repository import SubscriptionRepository
from progression.infrastructure.progression.service import ProgressionServiceImpl
from progression.infrastructure.storage.gateway import SafeGateway
from progression.infrastructure.streak import StreakDisplay


def test_complete_session_updates_streak_and_challenges(gateway):
    service = ProgressionServiceImpl(gateway)
    for day in ("2024-01-01", "2024-01-02"):
        result = service.complete_session(make_session(day), today=day)
        assert result.session_saved
        assert result.newly_completed == []

    result = service.complete_session(make_session("2024-01-03"), today="2024-01-03")
    assert result.streak.current_streak == 3
    assert result.newly_completed == ["survive_withdrawal"]
    by_id = {c.id: c for c in result.challenges}
    assert by_id["four_day_reset"].unlocked


def test_second_session_same_day_keeps_streak(gateway):
    service = ProgressionServiceImpl(gateway)
    service.complete_session(make_session("2024-01-01"), today="2024-01-01")
    result = service.complete_session(make_session("2024-01-01"), today="2024-01-01")
    assert result.streak.current_streak == 1
    assert service.get_stats(today="2024-01-01").total_sessions == 2


def test_incomplete_session_does_not_touch_streak(gateway):
    service = ProgressionServiceImpl(gateway)
    result = service.complete_session(make_session("2024-01-01", completed=False), today="2024-01-01")
    assert result.streak.current_streak == 0
    assert service.get_streak(today="2024-01-01").message.display is StreakDisplay.ZERO


def test_get_streak_message(gateway):
    service = ProgressionServiceImpl(gateway)
    service.complete_session(make_session("2024-01-01"), today="2024-01-01")
    assert service.get_streak(today="2024-01-01").message.display is StreakDisplay.ACTIVE_TODAY
    pending = service.get_streak(today="2024-01-02")
    assert pending.message.display is StreakDisplay.ACTIVE_PENDING
    assert pending.message.sub_text == "Don't break it!"


def test_get_challenges_reads_subscription_flag(gateway):
    service = ProgressionServiceImpl(gateway)
    for day in range(1, 13):
        date = f"2024-01-{day:02d}"
        service.complete_session(make_session(date, protection_level="ruthless"), today=date)

    ruthless = {c.id: c for c in service.get_challenges()}["ruthless_survivor"]
    assert ruthless.completed and not ruthless.unlocked

    SubscriptionRepository(gateway).set_is_pro(True)
    ruthless = {c.id: c for c in service.get_challenges()}["ruthless_survivor"]
    assert ruthless.unlocked


def test_stats_and_rewire_day(gateway):
    service = ProgressionServiceImpl(gateway)
    service.complete_session(make_session("2024-01-01", duration_seconds=1800), today="2024-01-01")
    service.complete_session(make_session("2024-01-02", duration_seconds=1200), today="2024-01-02")
    stats = service.get_stats(today="2024-01-02")
    assert stats.total_time_seconds == 3000
    assert stats.total_time_text == "50m"
    assert stats.current_streak == 2
    assert stats.rewire_day == 2
    assert service.get_rewire_day(today="2024-01-02") == 2


def test_storage_outage_degrades_without_raising():
    errors = []
    service = ProgressionServiceImpl(FailingGateway(), on_storage_error=lambda op, key, exc: errors.append(op))
    result = service.complete_session(make_session("2024-01-01"), today="2024-01-01")
    assert not result.session_saved
    assert result.streak.current_streak == 1
    by_id = {c.id: c for c in result.challenges}
    assert by_id["survive_withdrawal"].progress == 1
    assert "set" in errors
    assert service.get_stats(today="2024-01-01").total_sessions == 0


def test_result_serializes_to_camel_case(gateway):
    service = ProgressionServiceImpl(gateway)
    result = service.complete_session(make_session("2024-01-01"), today="2024-01-01")
    payload = result.model_dump(by_alias=True)
    assert payload["streak"] == {"currentStreak": 1, "lastSessionDate": "2024-01-01", "longestStreak": 1}
    assert "newlyCompleted" in payload
    assert payload["challenges"][0]["isPro"] is False


def test_storage_error_callback_applies_to_prewrapped_gateway():
    errors = []
    service = ProgressionServiceImpl(
        SafeGateway(FailingGateway()),
        on_storage_error=lambda op, key, exc: errors.append((op, key)),
    )
    service.get_challenges()
    assert ("get", "@dawg_sessions") in errors
