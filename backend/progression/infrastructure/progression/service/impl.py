"""
진행(Progression) 서비스 구현체.
SessionLog·StreakTracker·ChallengeEvaluator·구독 플래그를 하나의 Gateway 위에서 묶는다.
"""
import logging
from datetime import tzinfo

from progression.domains.session import rewire
from progression.domains.session.repository import (
    MilestoneRepository,
    SessionLogRepository,
    StartDateRepository,
)
from progression.domains.session.schemas import BrainComparison, SessionRecord, TimelineDay, TrendReport
from progression.domains.session.stats import calculate_stats, format_total_time, get_rewire_day
from progression.domains.subscription.repository import SubscriptionRepository
from progression.infrastructure.challenge.catalog import ChallengeCatalog
from progression.infrastructure.challenge.evaluator import ChallengeEvaluator
from progression.infrastructure.challenge.schemas import EvaluatedChallenge
from progression.infrastructure.progression.schemas import (
    SessionCompletionResult,
    StatsResponse,
    StreakStateResponse,
)
from progression.infrastructure.storage.gateway import ErrorCallback, PersistenceGateway, ensure_safe
from progression.infrastructure.streak.streak_tracker import StreakTracker, streak_message

logger = logging.getLogger(__name__)


class ProgressionServiceImpl:
    """진행 서비스 구현. 저장 실패는 모두 경계에서 흡수되며 예외로 올라오지 않는다."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        catalog: ChallengeCatalog | None = None,
        tz: tzinfo | None = None,
        on_storage_error: ErrorCallback | None = None,
    ) -> None:
        safe = ensure_safe(gateway, on_error=on_storage_error)
        self._sessions = SessionLogRepository(safe)
        self._start_dates = StartDateRepository(safe)
        self._milestones = MilestoneRepository(safe)
        self._subscription = SubscriptionRepository(safe)
        self._tracker = StreakTracker(safe, tz=tz)
        self._evaluator = ChallengeEvaluator(catalog)

    @property
    def tracker(self) -> StreakTracker:
        return self._tracker

    def get_streak(self, today: str | None = None) -> StreakStateResponse:
        day = today or self._tracker.today()
        state = self._tracker.load()
        return StreakStateResponse(streak=state, message=streak_message(state, day))

    def get_challenges(self) -> list[EvaluatedChallenge]:
        return self._evaluator.evaluate_all(
            self._sessions.get_sessions(),
            self._tracker.load(),
            self._subscription.get_is_pro(),
        )

    def complete_session(self, record: SessionRecord, today: str | None = None) -> SessionCompletionResult:
        """
        세션 1건 처리: 로그 추가 → (완료 시) Streak 갱신 → 챌린지 재평가.
        단일 writer 전제(사용자당 동시에 하나의 호출).
        """
        day = today or self._tracker.today()
        is_pro = self._subscription.get_is_pro()
        before = self._evaluator.evaluate_all(self._sessions.get_sessions(), self._tracker.load(), is_pro)

        saved = self._sessions.save_session(record)
        if record.completed:
            streak = self._tracker.record_session(day)
        else:
            streak = self._tracker.load()

        sessions = self._sessions.get_sessions()
        if not saved:
            # 저장 실패 시에도 이번 세션을 반영한 결과를 돌려준다
            sessions = sessions + [record]
        after = self._evaluator.evaluate_all(sessions, streak, is_pro)

        was_completed = {c.id for c in before if c.completed}
        newly_completed = [c.id for c in after if c.completed and c.id not in was_completed]
        if newly_completed:
            logger.info("[progression] challenges completed session_id=%s ids=%s", record.id, newly_completed)
        return SessionCompletionResult(
            streak=streak,
            challenges=after,
            newly_completed=newly_completed,
            session_saved=saved,
        )

    def get_rewire_day(self, today: str | None = None) -> int:
        day = today or self._tracker.today()
        sessions = self._sessions.get_sessions()
        start = self._start_dates.ensure_start_date(sessions, day)
        return get_rewire_day(sessions, start)

    def get_stats(self, today: str | None = None) -> StatsResponse:
        day = today or self._tracker.today()
        sessions = self._sessions.get_sessions()
        stats = calculate_stats(sessions, day)
        return StatsResponse(
            total_sessions=stats.total_sessions,
            total_time_seconds=stats.total_time_seconds,
            total_time_text=format_total_time(stats.total_time_seconds),
            longest_session_seconds=stats.longest_session_seconds,
            current_streak=stats.current_streak,
            last_session_date=stats.last_session_date,
            avg_stillness_percent=stats.avg_stillness_percent,
            total_blinks=stats.total_blinks,
            rewire_day=self.get_rewire_day(day),
        )

    # ── 90일 리와이어 진행 ──────────────────────────────────────

    def _sessions_and_start(self, day: str) -> tuple[list[SessionRecord], str]:
        sessions = self._sessions.get_sessions()
        return sessions, self._start_dates.ensure_start_date(sessions, day)

    def get_calendar_day_number(self, today: str | None = None) -> int:
        day = today or self._tracker.today()
        _, start = self._sessions_and_start(day)
        return rewire.get_calendar_day_number(start, day)

    def get_timeline(self, today: str | None = None) -> list[TimelineDay]:
        day = today or self._tracker.today()
        sessions, start = self._sessions_and_start(day)
        return rewire.get_timeline(sessions, start, day)

    def get_todays_sessions(self, today: str | None = None) -> list[SessionRecord]:
        day = today or self._tracker.today()
        return rewire.get_todays_sessions(self._sessions.get_sessions(), day)

    def get_today_total_duration(self, today: str | None = None) -> int:
        day = today or self._tracker.today()
        return rewire.get_today_total_duration(self._sessions.get_sessions(), day)

    def get_trends(self) -> TrendReport:
        return rewire.compute_trends(self._sessions.get_sessions())

    def get_brain_vs_average(self) -> BrainComparison:
        return rewire.compute_brain_vs_average(self._sessions.get_sessions())

    def get_celebrated_milestones(self) -> list[int]:
        return self._milestones.get_celebrated_milestones()

    def get_pending_milestone(self, today: str | None = None) -> int | None:
        """도달했지만 아직 축하하지 않은 마일스톤(리와이어 일수 기준)."""
        return rewire.pending_milestone(self.get_rewire_day(today), self._milestones.get_celebrated_milestones())

    def mark_milestone_celebrated(self, day: int) -> bool:
        return self._milestones.mark_celebrated(day)
