"""
챌린지 진행도 규칙 — 다섯 가지 형태의 태그 기반 값(ProgressRule).
모든 규칙은 순수 함수: 세션 목록·StreakData를 읽기만 하며 결과는 target으로 상한 처리된다.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from progression.core.calendar_day import days_between
from progression.domains.session.schemas import ProtectionLevel, SessionRecord
from progression.infrastructure.streak.schemas import StreakData


class RuleKind(str, Enum):
    DISTINCT_DAYS = "distinct_days"
    CONSECUTIVE_DAYS = "consecutive_days"
    METRIC_THRESHOLD = "metric_threshold"
    STREAK = "streak"
    PROTECTION_LEVEL = "protection_level"


class MetricName(str, Enum):
    """스코어링 패스가 만든 세션 지표."""

    BLINK_SCORE = "blink_score"
    STILLNESS_PERCENT = "stillness_percent"
    DAWG_SCORE = "dawg_score"


@dataclass(frozen=True)
class ProgressRule:
    """
    진행도 규칙. kind에 따라 사용하는 파라미터가 다르다.
    - CONSECUTIVE_DAYS: min_duration_seconds (일자 인정 필터)
    - METRIC_THRESHOLD: metric, threshold (초과 기준)
    - PROTECTION_LEVEL: protection_level
    """

    kind: RuleKind
    min_duration_seconds: int = 0
    metric: Optional[MetricName] = None
    threshold: float = 0.0
    protection_level: Optional[ProtectionLevel] = None

    def __post_init__(self) -> None:
        # frozen dataclass: 문자열 입력(JSON 설정)도 Enum으로 정규화
        object.__setattr__(self, "kind", RuleKind(self.kind))
        # 숫자 파라미터도 정규화: 비교 시점이 아니라 생성 시점에 실패해야 한다
        object.__setattr__(self, "threshold", float(self.threshold))
        object.__setattr__(self, "min_duration_seconds", int(self.min_duration_seconds))
        if self.metric is not None:
            object.__setattr__(self, "metric", MetricName(self.metric))
        if self.protection_level is not None:
            object.__setattr__(self, "protection_level", ProtectionLevel(self.protection_level))
        if self.kind is RuleKind.METRIC_THRESHOLD and self.metric is None:
            raise ValueError("metric_threshold rule requires a metric")
        if self.kind is RuleKind.PROTECTION_LEVEL and self.protection_level is None:
            raise ValueError("protection_level rule requires a protection level")
        if self.min_duration_seconds < 0:
            raise ValueError("min_duration_seconds must be >= 0")

    def compute(self, sessions: Sequence[SessionRecord], streak: StreakData, target: int) -> int:
        """min(target, 규칙 결과)."""
        raw = _RULE_FUNCTIONS[self.kind](self, sessions, streak)
        return max(0, min(target, raw))


# ── 규칙 생성 헬퍼 ───────────────────────────────────────────────

def distinct_days() -> ProgressRule:
    return ProgressRule(kind=RuleKind.DISTINCT_DAYS)


def consecutive_days(min_duration_seconds: int = 0) -> ProgressRule:
    return ProgressRule(kind=RuleKind.CONSECUTIVE_DAYS, min_duration_seconds=min_duration_seconds)


def metric_threshold(metric: MetricName, threshold: float) -> ProgressRule:
    return ProgressRule(kind=RuleKind.METRIC_THRESHOLD, metric=metric, threshold=threshold)


def streak_length() -> ProgressRule:
    return ProgressRule(kind=RuleKind.STREAK)


def protection_level_count(level: ProtectionLevel) -> ProgressRule:
    return ProgressRule(kind=RuleKind.PROTECTION_LEVEL, protection_level=level)


# ── 집계 함수 ────────────────────────────────────────────────────

def longest_consecutive_run(days: Iterable[str]) -> int:
    """
    중복 제거·오름차순 정렬 후 연속(정확히 1일 차이) 구간의 최대 길이. 빈 집합이면 0.
    """
    sorted_days = sorted(set(days))
    if not sorted_days:
        return 0
    max_run = 0
    current_run = 1
    for prev, curr in zip(sorted_days, sorted_days[1:]):
        if days_between(prev, curr) == 1:
            current_run += 1
        else:
            max_run = max(max_run, current_run)
            current_run = 1
    return max(max_run, current_run)


def _distinct_days(rule: ProgressRule, sessions: Sequence[SessionRecord], streak: StreakData) -> int:
    return len({s.date for s in sessions if s.completed})


def _consecutive_days(rule: ProgressRule, sessions: Sequence[SessionRecord], streak: StreakData) -> int:
    qualifying = (
        s.date for s in sessions
        if s.completed and s.duration_seconds >= rule.min_duration_seconds
    )
    return longest_consecutive_run(qualifying)


def _metric_threshold(rule: ProgressRule, sessions: Sequence[SessionRecord], streak: StreakData) -> int:
    # 스코어링된 세션만 대상. 지표가 없으면 0으로 간주
    metric = rule.metric.value
    return sum(1 for s in sessions if s.is_scored and s.metric(metric) > rule.threshold)


def _streak(rule: ProgressRule, sessions: Sequence[SessionRecord], streak: StreakData) -> int:
    return max(streak.current_streak, streak.longest_streak)


def _protection_level(rule: ProgressRule, sessions: Sequence[SessionRecord], streak: StreakData) -> int:
    return sum(1 for s in sessions if s.completed and s.protection_level == rule.protection_level)


_RULE_FUNCTIONS: dict[RuleKind, Callable[[ProgressRule, Sequence[SessionRecord], StreakData], int]] = {
    RuleKind.DISTINCT_DAYS: _distinct_days,
    RuleKind.CONSECUTIVE_DAYS: _consecutive_days,
    RuleKind.METRIC_THRESHOLD: _metric_threshold,
    RuleKind.STREAK: _streak,
    RuleKind.PROTECTION_LEVEL: _protection_level,
}
