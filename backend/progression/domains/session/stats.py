"""
세션 통계 — 순수 함수형 집계.
동일 세션 목록·동일 today → 항상 동일 결과.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from progression.core.calendar_day import parse_day, previous_day
from progression.domains.session.schemas import SessionRecord


@dataclass(frozen=True)
class SessionStats:
    total_sessions: int
    total_time_seconds: int
    longest_session_seconds: int
    current_streak: int
    last_session_date: Optional[str] = None
    avg_stillness_percent: Optional[int] = None
    total_blinks: Optional[int] = None


def history_streak(days: Iterable[str], today: str) -> int:
    """
    세션 기록에서 직접 계산한 현재 연속 일수.
    가장 최근 일자가 오늘 또는 어제가 아니면 0, 그렇지 않으면 그 날부터 하루씩 거슬러 센다.
    """
    unique = set(days)
    if not unique:
        return 0
    latest = max(unique, key=parse_day)
    yesterday = previous_day(today)
    if latest != today and latest != yesterday:
        return 0
    streak = 0
    cursor = latest
    while cursor in unique:
        streak += 1
        cursor = previous_day(cursor)
    return streak


def calculate_stats(sessions: list[SessionRecord], today: str) -> SessionStats:
    """완료 세션 기준 누적 통계."""
    completed = [s for s in sessions if s.completed]
    if not completed:
        return SessionStats(
            total_sessions=0,
            total_time_seconds=0,
            longest_session_seconds=0,
            current_streak=0,
        )

    latest = max(completed, key=lambda s: (s.timestamp, s.date))
    with_stillness = [s for s in completed if s.stillness_percent is not None]
    avg_stillness = (
        round(sum(s.stillness_percent for s in with_stillness) / len(with_stillness))
        if with_stillness
        else None
    )
    total_blinks = sum(s.blinks_count or 0 for s in completed)

    return SessionStats(
        total_sessions=len(completed),
        total_time_seconds=sum(s.duration_seconds for s in completed),
        longest_session_seconds=max(s.duration_seconds for s in completed),
        current_streak=history_streak((s.date for s in completed), today),
        last_session_date=latest.date,
        avg_stillness_percent=avg_stillness,
        total_blinks=total_blinks or None,
    )


def get_rewire_day(sessions: list[SessionRecord], start_date: str) -> int:
    """시작일 이후 완료 세션이 있는 고유 일수."""
    return len({s.date for s in sessions if s.completed and s.date >= start_date})


def format_total_time(seconds: int) -> str:
    """초 → '2h 34m' / '45m' / '30s'."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return f"{seconds}s"
