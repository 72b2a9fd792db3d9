"""
일 단위 연속 달성(Streak) 갱신 — StreakTracker.
같은 날 중복 완료는 멱등(no-op), 어제 이후 첫 완료는 +1, 2일 이상 공백이면 1로 초기화.
영속성은 best-effort: 저장 실패 시에도 계산된 상태를 그대로 반환한다.

단일 writer 전제: 사용자당 동시에 하나의 record_session만 실행되어야 한다.
외부 직렬화 없이 동시 호출하면 read-modify-write 경합으로 갱신 하나가 유실될 수 있다.
"""
import logging
from datetime import tzinfo

from progression.core import calendar_day
from progression.infrastructure.storage.gateway import PersistenceGateway
from progression.infrastructure.streak.constants import (
    STREAK_CONTINUE_DAYS,
    STREAK_EMOJI,
    STREAK_PENDING_TEXT,
    STREAK_START_TEXT,
)
from progression.infrastructure.streak.repository import StreakRepository
from progression.infrastructure.streak.schemas import StreakData, StreakDisplay, StreakMessage

logger = logging.getLogger(__name__)


def compute_new_streak(previous: StreakData, today: str) -> StreakData:
    """
    순수 상태 전이. 입력을 변경하지 않는다.
    - last_session_date == today → 그대로 반환
    - last_session_date == today - 1일 → current + 1
    - 그 외(공백 2일 이상, 첫 세션, 시계 변경으로 미래 일자) → 1
    """
    calendar_day.parse_day(today)
    last = previous.last_session_date
    if last == today:
        return previous
    if last is not None and calendar_day.days_between(last, today) == STREAK_CONTINUE_DAYS:
        new_streak = previous.current_streak + 1
    else:
        new_streak = 1
    return StreakData(
        current_streak=new_streak,
        last_session_date=today,
        longest_streak=max(previous.longest_streak, new_streak),
    )


def has_session_today(state: StreakData, today: str) -> bool:
    return state.last_session_date is not None and state.last_session_date == today


def describe_streak(state: StreakData, today: str) -> StreakDisplay:
    if state.current_streak == 0:
        return StreakDisplay.ZERO
    if has_session_today(state, today):
        return StreakDisplay.ACTIVE_TODAY
    return StreakDisplay.ACTIVE_PENDING


def streak_message(state: StreakData, today: str) -> StreakMessage:
    """홈 화면 Streak 문구."""
    display = describe_streak(state, today)
    if display is StreakDisplay.ZERO:
        return StreakMessage(emoji=STREAK_EMOJI, main_text=STREAK_START_TEXT, display=display)
    day_text = "Day" if state.current_streak == 1 else "Days"
    return StreakMessage(
        emoji=STREAK_EMOJI,
        main_text=f"{state.current_streak} {day_text} Streak",
        sub_text=None if display is StreakDisplay.ACTIVE_TODAY else STREAK_PENDING_TEXT,
        display=display,
    )


class StreakTracker:
    """
    단일 StreakData 레코드 로드·갱신.
    today 미지정 시 설정된 달력 일자 정책(core.calendar_day)으로 오늘을 구한다.
    """

    def __init__(self, gateway: PersistenceGateway, tz: tzinfo | None = None) -> None:
        self._repository = StreakRepository(gateway)
        self._tz = tz

    def today(self) -> str:
        return calendar_day.today(self._tz)

    def load(self) -> StreakData:
        """저장된 상태. 없거나 손상되었으면 zero-state."""
        return self._repository.get_streak_state()

    def record_session(self, today: str | None = None) -> StreakData:
        """세션 완료 후 Streak 갱신. 같은 날 재호출은 저장 없이 기존 상태 반환."""
        day = today if today is not None else self.today()
        previous = self.load()
        updated = compute_new_streak(previous, day)
        if updated is previous:
            logger.debug("[streak] already recorded today=%s streak=%s", day, previous.current_streak)
            return previous
        self._repository.save_streak_state(updated)
        logger.info(
            "[streak] updated today=%s previous=%s new=%s longest=%s",
            day, previous.current_streak, updated.current_streak, updated.longest_streak,
        )
        return updated

    def describe(self, state: StreakData | None = None, today: str | None = None) -> StreakDisplay:
        return describe_streak(state if state is not None else self.load(), today or self.today())

    def message(self, state: StreakData | None = None, today: str | None = None) -> StreakMessage:
        return streak_message(state if state is not None else self.load(), today or self.today())
