"""
진행(Progression) 엔진 설정 — 환경 변수 기반.
달력 일자(calendar day) 타임존 정책, SQLAlchemy 저장소 URL, 챌린지 카탈로그 override 경로를 한 곳에서 관리한다.
"""
import logging
from datetime import tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """진행 엔진 설정. 값이 없으면 기본값을 사용한다."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    progression_timezone: Optional[str] = Field(
        None,
        validation_alias="PROGRESSION_TIMEZONE",
        description="달력 일자 산출용 IANA 타임존 (없으면 기기 로컬 타임존)",
    )
    progression_database_url: str = Field(
        "sqlite:///./progression.db",
        validation_alias="PROGRESSION_DATABASE_URL",
        description="SqlAlchemyGateway 저장소 URL",
    )
    challenge_catalog_path: Optional[str] = Field(
        None,
        validation_alias="CHALLENGE_CATALOG_PATH",
        description="챌린지 카탈로그 JSON override 경로",
    )

    def resolve_timezone(self) -> tzinfo | None:
        """
        설정된 IANA 타임존을 반환. 미설정·알 수 없는 이름이면 None(기기 로컬 타임존).
        """
        if not self.progression_timezone:
            return None
        try:
            return ZoneInfo(self.progression_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                "[config] unknown PROGRESSION_TIMEZONE=%s, falling back to local time",
                self.progression_timezone,
            )
            return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reset_settings() -> None:
    """설정 캐시 초기화(환경 변수 변경 반영용)."""
    get_settings.cache_clear()
