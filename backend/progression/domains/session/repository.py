"""
세션 로그 저장소 — Gateway 위의 append-only JSON 배열.
읽기 실패·손상 데이터는 빈 로그로, 쓰기 실패는 로그만 남기고 흡수한다.
"""
import json
import logging

from pydantic import ValidationError

from progression.core.calendar_day import is_valid_day
from progression.domains.session.constants import CELEBRATED_MILESTONES_KEY, SESSIONS_KEY, START_DATE_KEY
from progression.domains.session.schemas import SessionRecord
from progression.infrastructure.storage.gateway import PersistenceGateway, ensure_safe

logger = logging.getLogger(__name__)


class SessionLogRepository:
    """세션 기록 목록 조회·추가."""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = ensure_safe(gateway)

    def _load_raw(self) -> list:
        data = self._gateway.get(SESSIONS_KEY)
        if data is None:
            return []
        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("[session] corrupted session log, ignoring: %s", e)
            return []
        if not isinstance(parsed, list):
            logger.warning("[session] session log is not a list, ignoring")
            return []
        return parsed

    def get_sessions(self) -> list[SessionRecord]:
        """저장된 전체 세션. 손상된 개별 항목은 건너뛴다."""
        sessions: list[SessionRecord] = []
        for index, item in enumerate(self._load_raw()):
            try:
                sessions.append(SessionRecord.model_validate(item))
            except ValidationError as e:
                logger.warning("[session] skipping malformed record #%s: %s", index, e.error_count())
        return sessions

    def save_session(self, record: SessionRecord) -> bool:
        """세션 1건 추가. 저장 성공 여부 반환(실패해도 예외 없음)."""
        raw = self._load_raw()
        raw.append(record.model_dump(mode="json", by_alias=True, exclude_none=True))
        ok = self._gateway.set(SESSIONS_KEY, json.dumps(raw, ensure_ascii=False).encode("utf-8"))
        if ok:
            logger.info("[session] saved session id=%s date=%s total=%s", record.id, record.date, len(raw))
        return ok

    def clear_sessions(self) -> bool:
        return self._gateway.delete(SESSIONS_KEY)


class StartDateRepository:
    """리와이어 시작일 저장소."""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = ensure_safe(gateway)

    def get_start_date(self) -> str | None:
        data = self._gateway.get(START_DATE_KEY)
        if data is None:
            return None
        try:
            value = data.decode("utf-8").strip()
        except UnicodeDecodeError:
            return None
        return value if is_valid_day(value) else None

    def set_start_date(self, day: str) -> bool:
        return self._gateway.set(START_DATE_KEY, day.encode("utf-8"))

    def ensure_start_date(self, sessions: list[SessionRecord], today: str) -> str:
        """시작일이 없으면 가장 이른 완료 세션 일자(없으면 today)로 저장 후 반환."""
        existing = self.get_start_date()
        if existing:
            return existing
        days = sorted(s.date for s in sessions if s.completed)
        earliest = days[0] if days else today
        self.set_start_date(earliest)
        return earliest


class MilestoneRepository:
    """축하를 이미 보여준 마일스톤 일차 집합."""

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = ensure_safe(gateway)

    def get_celebrated_milestones(self) -> list[int]:
        data = self._gateway.get(CELEBRATED_MILESTONES_KEY)
        if data is None:
            return []
        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("[milestone] corrupted milestone set, ignoring: %s", e)
            return []
        if not isinstance(parsed, list):
            return []
        return [day for day in parsed if isinstance(day, int) and not isinstance(day, bool)]

    def mark_celebrated(self, day: int) -> bool:
        """일차 추가(이미 있으면 저장 생략). 저장 성공 여부 반환."""
        current = self.get_celebrated_milestones()
        if day in current:
            return True
        current.append(day)
        ok = self._gateway.set(CELEBRATED_MILESTONES_KEY, json.dumps(current).encode("utf-8"))
        if ok:
            logger.info("[milestone] celebrated day=%s", day)
        return ok
