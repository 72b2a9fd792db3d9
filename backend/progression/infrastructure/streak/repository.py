"""
StreakData 영속성 — 리포지토리 패턴.
단일 키 읽기/쓰기. 없거나 손상된 데이터는 오류가 아니라 zero-state로 취급한다.
"""
import json
import logging

from pydantic import ValidationError

from progression.infrastructure.storage.gateway import PersistenceGateway, ensure_safe
from progression.infrastructure.streak.constants import STREAK_STORAGE_KEY
from progression.infrastructure.streak.schemas import StreakData

logger = logging.getLogger(__name__)


class StreakRepository:
    """
    Gateway 위의 StreakData 접근 객체.
    get_streak_state는 절대 예외를 던지지 않으며, save_streak_state 실패는 False로만 알린다.
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = ensure_safe(gateway)

    def get_streak_state(self) -> StreakData:
        data = self._gateway.get(STREAK_STORAGE_KEY)
        if data is None:
            return StreakData.zero()
        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("[streak] corrupted streak data, using defaults: %s", e)
            return StreakData.zero()
        if not isinstance(parsed, dict):
            logger.warning("[streak] streak data is not an object, using defaults")
            return StreakData.zero()
        try:
            return StreakData.model_validate(parsed)
        except ValidationError as e:
            logger.warning("[streak] invalid streak data, using defaults: %s", e.error_count())
            return StreakData.zero()

    def save_streak_state(self, state: StreakData) -> bool:
        ok = self._gateway.set(STREAK_STORAGE_KEY, state.to_json())
        if not ok:
            logger.warning("[streak] streak not persisted, continuing with in-memory state")
        return ok
