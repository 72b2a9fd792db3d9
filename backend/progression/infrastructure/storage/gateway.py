"""
PersistenceGateway — 이름(key)별 직렬화 Blob get/set 경계.
읽기·쓰기 실패는 이 경계에서 흡수(absent / False)하고, 필요하면 외부 관측 채널(on_error)로 전달한다.
코어(StreakTracker·ChallengeEvaluator)는 예외를 보지 않는다.
"""
import logging
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from progression.core.database import get_session_factory
from progression.infrastructure.storage.models import StoredBlob

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, str, Exception], None]


class PersistenceGateway(Protocol):
    """불투명 Blob 저장소 인터페이스."""

    def get(self, key: str) -> bytes | None:
        """key에 저장된 값. 없으면 None."""
        ...

    def set(self, key: str, value: bytes) -> bool:
        """저장 성공 여부."""
        ...

    def delete(self, key: str) -> bool:
        ...


class InMemoryGateway:
    """dict 기반 Gateway — 테스트 및 휘발성 기본값."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self._data[key] = bytes(value)
        return True

    def delete(self, key: str) -> bool:
        self._data.pop(key, None)
        return True


class SqlAlchemyGateway:
    """
    progression_blobs 테이블 기반 Gateway.
    SQLAlchemyError는 경고 로그 후 None / False로 변환한다.
    """

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self._session_factory = session_factory

    def _factory(self) -> sessionmaker:
        return self._session_factory or get_session_factory()

    def get(self, key: str) -> bytes | None:
        try:
            with self._factory()() as session:
                row = session.query(StoredBlob).filter(StoredBlob.key == key).first()
                return bytes(row.value) if row else None
        except SQLAlchemyError as e:
            logger.warning("[storage] get failed key=%s: %s", key, e)
            return None

    def set(self, key: str, value: bytes) -> bool:
        try:
            with self._factory()() as session:
                row = session.query(StoredBlob).filter(StoredBlob.key == key).first()
                if row:
                    row.value = value
                else:
                    session.add(StoredBlob(key=key, value=value))
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.warning("[storage] set failed key=%s: %s", key, e)
            return False

    def delete(self, key: str) -> bool:
        try:
            with self._factory()() as session:
                session.query(StoredBlob).filter(StoredBlob.key == key).delete()
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.warning("[storage] delete failed key=%s: %s", key, e)
            return False


class SafeGateway:
    """
    임의의 Gateway를 감싸 모든 예외를 흡수한다.
    실패는 on_error(operation, key, exc)로 전달(관측용)하며 코어 계약은 바뀌지 않는다.
    """

    def __init__(self, inner: PersistenceGateway, on_error: ErrorCallback | None = None) -> None:
        self._inner = inner
        self._on_error = on_error

    @property
    def inner(self) -> PersistenceGateway:
        return self._inner

    def _report(self, operation: str, key: str, exc: Exception) -> None:
        logger.warning("[storage] %s failed key=%s: %s", operation, key, exc)
        if self._on_error is None:
            return
        try:
            self._on_error(operation, key, exc)
        except Exception:  # noqa: BLE001
            logger.exception("[storage] on_error callback raised")

    def get(self, key: str) -> bytes | None:
        try:
            value = self._inner.get(key)
        except Exception as e:  # noqa: BLE001
            self._report("get", key, e)
            return None
        if value is None:
            return None
        if isinstance(value, str):
            return value.encode("utf-8")
        if not isinstance(value, (bytes, bytearray, memoryview)):
            logger.warning("[storage] get returned %s for key=%s, ignored", type(value).__name__, key)
            return None
        return bytes(value)

    def set(self, key: str, value: bytes) -> bool:
        try:
            ok = self._inner.set(key, value)
        except Exception as e:  # noqa: BLE001
            self._report("set", key, e)
            return False
        return ok is not False

    def delete(self, key: str) -> bool:
        try:
            ok = self._inner.delete(key)
        except Exception as e:  # noqa: BLE001
            self._report("delete", key, e)
            return False
        return ok is not False


def ensure_safe(gateway: PersistenceGateway, on_error: ErrorCallback | None = None) -> SafeGateway:
    """
    SafeGateway로 감싸서 반환. 이미 SafeGateway면 on_error가 없을 때 그대로 쓰고,
    on_error가 주어지면 내부 Gateway를 새 콜백으로 다시 감싼다(중첩 래핑 없음).
    """
    if isinstance(gateway, SafeGateway):
        if on_error is None:
            return gateway
        return SafeGateway(gateway.inner, on_error=on_error)
    return SafeGateway(gateway, on_error=on_error)
