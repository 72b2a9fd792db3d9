"""
진행(Progression) 서비스 인터페이스.
호스트 앱이 Streak·챌린지·통계를 조회하고 세션 완료를 기록하는 계약을 정의한다.
"""
from typing import Protocol

from progression.domains.session.schemas import BrainComparison, SessionRecord, TimelineDay, TrendReport
from progression.infrastructure.challenge.schemas import EvaluatedChallenge
from progression.infrastructure.progression.schemas import (
    SessionCompletionResult,
    StatsResponse,
    StreakStateResponse,
)


class ProgressionService(Protocol):
    def get_streak(self, today: str | None = None) -> StreakStateResponse:
        """저장된 Streak 상태와 표시 문구."""
        ...

    def complete_session(self, record: SessionRecord, today: str | None = None) -> SessionCompletionResult:
        """세션 로그에 추가하고 Streak 갱신 후 챌린지를 재평가한다. 미완료 세션은 Streak을 바꾸지 않는다."""
        ...

    def get_challenges(self) -> list[EvaluatedChallenge]:
        """현재 세션 기록·Streak·구독 여부 기준 챌린지 평가."""
        ...

    def get_stats(self, today: str | None = None) -> StatsResponse:
        ...

    def get_rewire_day(self, today: str | None = None) -> int:
        """시작일 이후 세션이 있는 고유 일수."""
        ...

    def get_calendar_day_number(self, today: str | None = None) -> int:
        """시작일 기준 달력 일차(1~90)."""
        ...

    def get_timeline(self, today: str | None = None) -> list[TimelineDay]:
        ...

    def get_todays_sessions(self, today: str | None = None) -> list[SessionRecord]:
        ...

    def get_today_total_duration(self, today: str | None = None) -> int:
        ...

    def get_trends(self) -> TrendReport:
        """최근 7개 vs 직전 7개 스코어링 세션 비교."""
        ...

    def get_brain_vs_average(self) -> BrainComparison:
        ...

    def get_celebrated_milestones(self) -> list[int]:
        ...

    def get_pending_milestone(self, today: str | None = None) -> int | None:
        ...

    def mark_milestone_celebrated(self, day: int) -> bool:
        ...
