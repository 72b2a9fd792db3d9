"""
키-값 Blob 저장 모델.
StreakData·세션 로그·구독 플래그 등 직렬화된 값을 이름(key)별 한 행으로 저장한다.
"""
from sqlalchemy import Column, DateTime, Integer, LargeBinary, String, func

from progression.core.database import Base


class StoredBlob(Base):
    """
    PersistenceGateway 백엔드 테이블 — key 유니크, value는 불투명 bytes.
    """

    __tablename__ = "progression_blobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(255), nullable=False, unique=True, index=True)
    value = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
