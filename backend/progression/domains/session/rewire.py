"""
90일 리와이어 진행 — 타임라인·오늘의 세션·추세·일반인 대비 비교.
모두 세션 목록과 달력 일자만 읽는 순수 함수.
"""
import math
from datetime import timedelta
from typing import Callable, Iterable, Optional, Sequence

from progression.core.calendar_day import days_between, format_day, parse_day
from progression.domains.session.constants import (
    BASELINE_BLINKS_PER_MINUTE,
    BASELINE_DURATION_SECONDS,
    BASELINE_STILLNESS_PERCENT,
    MILESTONE_DAYS,
    REWIRE_PROGRAM_DAYS,
    TREND_WINDOW,
)
from progression.domains.session.schemas import (
    BrainComparison,
    ComparisonItem,
    DayStatus,
    SessionRecord,
    TimelineDay,
    TrendItem,
    TrendReport,
)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp_percentile(value: float) -> int:
    return min(99, max(1, _round_half_up(value)))


def _average(sessions: Sequence[SessionRecord], fn: Callable[[SessionRecord], float], empty: float = 0.0) -> float:
    if not sessions:
        return empty
    return sum(fn(s) for s in sessions) / len(sessions)


def _pct_change(current: float, previous: float) -> int:
    if previous == 0:
        return 0
    return _round_half_up((current - previous) / previous * 100)


def _scored(sessions: Iterable[SessionRecord]) -> list[SessionRecord]:
    # 점수와 정지율이 모두 있는 세션만 비교 대상
    return [s for s in sessions if s.dawg_score is not None and s.stillness_percent is not None]


def _bpm(session: SessionRecord) -> float:
    return session.blinks_per_minute if session.blinks_per_minute is not None else BASELINE_BLINKS_PER_MINUTE


# ── 타임라인 ────────────────────────────────────────────────────

def get_calendar_day_number(start_date: str, today: str) -> int:
    """시작일부터 오늘까지의 달력 일차(1부터, 1~90으로 제한)."""
    return min(REWIRE_PROGRAM_DAYS, max(1, days_between(start_date, today) + 1))


def get_timeline(sessions: Iterable[SessionRecord], start_date: str, today: str) -> list[TimelineDay]:
    """
    시작일부터 90일 각각의 상태.
    오늘 → current / currentCompleted, 지난 날 → completed / missed, 나머지 → future.
    """
    session_days = {s.date for s in sessions if s.completed}
    calendar_day = get_calendar_day_number(start_date, today)
    start = parse_day(start_date)

    timeline: list[TimelineDay] = []
    for offset in range(REWIRE_PROGRAM_DAYS):
        day_number = offset + 1
        day = format_day(start + timedelta(days=offset))
        if day == today:
            status = DayStatus.CURRENT_COMPLETED if day in session_days else DayStatus.CURRENT
        elif day_number < calendar_day:
            status = DayStatus.COMPLETED if day in session_days else DayStatus.MISSED
        else:
            status = DayStatus.FUTURE
        timeline.append(TimelineDay(day_number=day_number, date=day, status=status))
    return timeline


def pending_milestone(rewire_day: int, celebrated: Iterable[int]) -> Optional[int]:
    """가장 최근에 도달한 마일스톤 일차. 이미 축하했거나 도달한 것이 없으면 None."""
    reached = [day for day in MILESTONE_DAYS if day <= rewire_day]
    if not reached or reached[-1] in set(celebrated):
        return None
    return reached[-1]


# ── 오늘의 세션 ──────────────────────────────────────────────────

def get_todays_sessions(sessions: Iterable[SessionRecord], today: str) -> list[SessionRecord]:
    return [s for s in sessions if s.date == today and s.completed]


def get_today_total_duration(sessions: Iterable[SessionRecord], today: str) -> int:
    return sum(s.duration_seconds for s in get_todays_sessions(sessions, today))


# ── 추세 / 비교 ─────────────────────────────────────────────────

def compute_trends(sessions: Iterable[SessionRecord]) -> TrendReport:
    """최근 7개 스코어링 세션 평균 vs 직전 7개 평균. 14개 미만이면 has_enough_data=False."""
    scored = sorted(_scored(sessions), key=lambda s: s.timestamp, reverse=True)
    recent = scored[:TREND_WINDOW]
    previous = scored[TREND_WINDOW:TREND_WINDOW * 2]

    recent_stillness = _average(recent, lambda s: s.stillness_percent or 0.0)
    prev_stillness = _average(previous, lambda s: s.stillness_percent or 0.0)
    recent_bpm = _average(recent, _bpm)
    prev_bpm = _average(previous, _bpm)
    recent_duration = _average(recent, lambda s: s.duration_seconds)
    prev_duration = _average(previous, lambda s: s.duration_seconds)

    return TrendReport(
        stillness=TrendItem(
            label="STILLNESS",
            current=recent_stillness,
            previous=prev_stillness,
            change=_pct_change(recent_stillness, prev_stillness),
            improving=recent_stillness >= prev_stillness,
        ),
        # 깜빡임은 적을수록 집중도가 높다
        focus=TrendItem(
            label="FOCUS",
            current=recent_bpm,
            previous=prev_bpm,
            change=_pct_change(prev_bpm, recent_bpm),
            improving=recent_bpm <= prev_bpm,
        ),
        endurance=TrendItem(
            label="ENDURANCE",
            current=recent_duration,
            previous=prev_duration,
            change=_pct_change(recent_duration, prev_duration),
            improving=recent_duration >= prev_duration,
        ),
        has_enough_data=len(scored) >= TREND_WINDOW * 2,
    )


def compute_brain_vs_average(sessions: Iterable[SessionRecord]) -> BrainComparison:
    scored = _scored(sessions)
    avg_stillness = _average(scored, lambda s: s.stillness_percent or 0.0)
    avg_bpm = _average(scored, _bpm, empty=BASELINE_BLINKS_PER_MINUTE)
    avg_duration = _average(scored, lambda s: s.duration_seconds)

    still_pct = _clamp_percentile(avg_stillness / BASELINE_STILLNESS_PERCENT * 50 + 25)
    focus_pct = _clamp_percentile(
        (BASELINE_BLINKS_PER_MINUTE - avg_bpm) / BASELINE_BLINKS_PER_MINUTE * 50 + 50
    )
    end_pct = _clamp_percentile(avg_duration / BASELINE_DURATION_SECONDS * 50 + 10)

    if avg_bpm <= BASELINE_BLINKS_PER_MINUTE:
        focus_description = f"Your focus is {abs(focus_pct - 50)}% deeper than the average person"
    else:
        focus_description = "Keep going, your focus is still building"

    return BrainComparison(
        stillness=ComparisonItem(
            label="STILLNESS",
            user_value=avg_stillness,
            baseline=BASELINE_STILLNESS_PERCENT,
            percentile=still_pct,
            description=f"You're stiller than {still_pct}% of people who try this",
        ),
        focus=ComparisonItem(
            label="FOCUS",
            user_value=avg_bpm,
            baseline=BASELINE_BLINKS_PER_MINUTE,
            percentile=focus_pct,
            description=focus_description,
        ),
        endurance=ComparisonItem(
            label="ENDURANCE",
            user_value=avg_duration,
            baseline=BASELINE_DURATION_SECONDS,
            percentile=end_pct,
            description=f"You sit {end_pct}% longer than most people can handle",
        ),
        has_data=bool(scored),
    )
