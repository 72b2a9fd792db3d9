"""
세션 기록(SessionRecord) 스키마.
외부 세션 로그가 소유하는 불변 값. 점수 지표(stillness·blink·dawg)는 스코어링 패스가 만든 경우에만 존재한다.
"""
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from progression.core.calendar_day import is_valid_day


class ProtectionLevel(str, Enum):
    EASY = "easy"
    STRICT = "strict"
    RUTHLESS = "ruthless"


class SessionRecord(BaseModel):
    """완료(또는 중단)된 세션 1건."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    date: str = Field(..., description="YYYY-MM-DD (달력 일자)")
    timestamp: int = Field(..., description="Unix 타임스탬프(ms)")
    completed: bool
    duration_seconds: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("durationSeconds", "duration_seconds", "duration"),
    )
    # 이전 버전 기록에는 보호 수준이 없으므로 easy로 간주
    protection_level: ProtectionLevel = ProtectionLevel.EASY
    stillness_percent: Optional[float] = None
    blink_score: Optional[float] = None
    dawg_score: Optional[float] = None
    blinks_count: Optional[int] = None
    blinks_per_minute: Optional[float] = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        if not is_valid_day(v):
            raise ValueError("date must be a YYYY-MM-DD calendar day")
        return v

    @property
    def is_scored(self) -> bool:
        return self.dawg_score is not None

    def metric(self, name: str) -> float:
        """점수 지표 값. 없으면 0."""
        value = getattr(self, name, None)
        return float(value) if value is not None else 0.0


class _SessionViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class DayStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    CURRENT_COMPLETED = "currentCompleted"
    MISSED = "missed"
    FUTURE = "future"


class TimelineDay(_SessionViewModel):
    """90일 타임라인의 하루."""

    day_number: int = Field(..., ge=1, description="1부터 시작하는 프로그램 일차")
    date: str
    status: DayStatus


class TrendItem(_SessionViewModel):
    label: str
    current: float
    previous: float
    change: int = Field(..., description="변화율(%)")
    improving: bool


class TrendReport(_SessionViewModel):
    stillness: TrendItem
    focus: TrendItem
    endurance: TrendItem
    has_enough_data: bool


class ComparisonItem(_SessionViewModel):
    label: str
    user_value: float
    baseline: float
    percentile: int = Field(..., ge=1, le=99)
    description: str


class BrainComparison(_SessionViewModel):
    stillness: ComparisonItem
    focus: ComparisonItem
    endurance: ComparisonItem
    has_data: bool
