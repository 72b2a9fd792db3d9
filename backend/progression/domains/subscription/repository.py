"""
Pro 구독 플래그 저장소.
기본값은 무료(False). 읽기 실패·알 수 없는 값도 False로 간주한다.
"""
import logging

from progression.infrastructure.storage.gateway import PersistenceGateway, ensure_safe

logger = logging.getLogger(__name__)

PRO_KEY = "rawdawg_pro"


class SubscriptionRepository:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = ensure_safe(gateway)

    def get_is_pro(self) -> bool:
        data = self._gateway.get(PRO_KEY)
        return data == b"true"

    def set_is_pro(self, is_pro: bool) -> bool:
        """구매 검증 후 호출. 저장 실패 시 False(예외 없음)."""
        ok = self._gateway.set(PRO_KEY, b"true" if is_pro else b"false")
        logger.info("[subscription] is_pro=%s saved=%s", is_pro, ok)
        return ok
