"""
Streak 상태·표시 스키마.
StreakData는 JSON {currentStreak, lastSessionDate, longestStreak}로 직렬화된다.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from progression.core.calendar_day import is_valid_day


class StreakData(BaseModel):
    """
    사용자별 단일 Streak 레코드.
    불변식: longest_streak >= current_streak >= 0.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_streak: int = Field(0, ge=0, description="연속 달성 일수")
    last_session_date: Optional[str] = Field(None, description="마지막 세션 일자 (YYYY-MM-DD)")
    longest_streak: int = Field(0, ge=0, description="최장 연속 달성 일수")

    @field_validator("last_session_date")
    @classmethod
    def _check_day(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_day(v):
            raise ValueError("lastSessionDate must be a YYYY-MM-DD calendar day")
        return v

    @model_validator(mode="after")
    def _check_longest(self) -> "StreakData":
        if self.longest_streak < self.current_streak:
            raise ValueError("longestStreak must be >= currentStreak")
        return self

    @classmethod
    def zero(cls) -> "StreakData":
        return cls(current_streak=0, last_session_date=None, longest_streak=0)

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class StreakDisplay(str, Enum):
    """홈 화면 표시 분기."""

    ZERO = "zero"
    ACTIVE_TODAY = "active-today"
    # 오늘 아직 기록 없음: "끊지 마세요" 경고
    ACTIVE_PENDING = "active-pending"


class StreakMessage(BaseModel):
    emoji: str
    main_text: str
    sub_text: Optional[str] = None
    display: StreakDisplay
