"""
달력 일자(calendar day) 정책.
일자는 'YYYY-MM-DD' 문자열. 오늘/어제는 설정된 타임존(없으면 기기 로컬)의 현재 시각 기준 날짜.
일자 간 거리는 경과 초가 아니라 date 연산으로 계산하므로 DST 전환(23h/25h)에 영향을 받지 않는다.
"""
from datetime import date, datetime, timedelta, timezone, tzinfo

from progression.core.config import get_settings

DAY_FORMAT = "%Y-%m-%d"


def _zone(tz: tzinfo | None) -> tzinfo | None:
    return tz if tz is not None else get_settings().resolve_timezone()


def parse_day(day: str) -> date:
    """'YYYY-MM-DD' → date. 형식이 맞지 않으면 ValueError."""
    if not isinstance(day, str) or len(day) != 10:
        raise ValueError(f"invalid calendar day: {day!r}")
    parsed = datetime.strptime(day, DAY_FORMAT).date()
    # strptime은 공백 패딩('2024-01- 9')도 받아들이므로 정규 표기와 일치해야 한다
    if format_day(parsed) != day:
        raise ValueError(f"non-canonical calendar day: {day!r}")
    return parsed


def format_day(d: date) -> str:
    return d.strftime(DAY_FORMAT)


def is_valid_day(day: object) -> bool:
    try:
        parse_day(day)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
    return True


def day_of(moment: datetime, tz: tzinfo | None = None) -> str:
    """
    시각 → 달력 일자. naive datetime은 기기 로컬 시각으로 간주한다.
    """
    zone = _zone(tz)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    local = moment.astimezone(zone) if zone is not None else moment.astimezone()
    return format_day(local.date())


def day_of_timestamp(timestamp_ms: int, tz: tzinfo | None = None) -> str:
    """Unix 타임스탬프(ms) → 달력 일자."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
    return day_of(moment, tz)


def today(tz: tzinfo | None = None, now: datetime | None = None) -> str:
    moment = now if now is not None else datetime.now(timezone.utc)
    return day_of(moment, tz)


def previous_day(day: str) -> str:
    return format_day(parse_day(day) - timedelta(days=1))


def days_between(earlier: str, later: str) -> int:
    """later - earlier (일 단위, 음수 가능)."""
    return (parse_day(later) - parse_day(earlier)).days
