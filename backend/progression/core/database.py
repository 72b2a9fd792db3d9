"""
SQLAlchemy 엔진·세션 팩토리.
SqlAlchemyGateway가 키-값 Blob 테이블을 읽고 쓸 때 사용한다.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from progression.core.config import get_settings

Base = declarative_base()

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine(database_url: str | None = None) -> Engine:
    global _engine
    if database_url is not None:
        return create_engine(database_url, future=True)
    if _engine is None:
        _engine = create_engine(get_settings().progression_database_url, future=True)
    return _engine


def get_session_factory(engine: Engine | None = None) -> sessionmaker:
    """엔진별 세션 팩토리. 인자가 없으면 설정 기반 기본 엔진의 팩토리(캐시)를 반환."""
    global _session_factory
    if engine is not None:
        return sessionmaker(bind=engine, expire_on_commit=False)
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


def init_db(engine: Engine | None = None) -> None:
    """테이블 생성(존재하면 건너뜀)."""
    # 모델 등록을 위해 import
    from progression.infrastructure.storage import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def reset_engine() -> None:
    """캐시된 기본 엔진·세션 팩토리 폐기(설정 변경 반영용)."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
