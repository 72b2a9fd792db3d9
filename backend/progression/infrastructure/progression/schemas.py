"""
진행 서비스 응답 스키마.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from progression.infrastructure.challenge.schemas import EvaluatedChallenge
from progression.infrastructure.streak.schemas import StreakData, StreakMessage


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionCompletionResult(_CamelModel):
    """세션 완료 처리 결과 — 갱신된 Streak과 재평가된 챌린지를 한 번에 반환."""

    streak: StreakData
    challenges: list[EvaluatedChallenge] = Field(default_factory=list)
    newly_completed: list[str] = Field(
        default_factory=list, description="이번 세션으로 새로 완료된 챌린지 id"
    )
    session_saved: bool = Field(True, description="세션 로그 저장 성공 여부 (best-effort)")


class StreakStateResponse(_CamelModel):
    streak: StreakData
    message: StreakMessage


class StatsResponse(_CamelModel):
    total_sessions: int
    total_time_seconds: int
    total_time_text: str
    longest_session_seconds: int
    current_streak: int
    last_session_date: Optional[str] = None
    avg_stillness_percent: Optional[int] = None
    total_blinks: Optional[int] = None
    rewire_day: int = 0
