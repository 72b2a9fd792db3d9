"""
설정값 기반 챌린지 카탈로그 로드.
CHALLENGE_CATALOG_PATH가 JSON 파일을 가리키면 그 정의를 사용하고, 없거나 잘못되었으면
경고 로그 후 기본 카탈로그를 사용한다. 코드 수정 없이 목표치·잠금 조건 변경 가능.

JSON 형식:
    {"challenges": [
        {"id": "...", "title": "...", "target": 3, "is_pro": false,
         "icon": "", "description": "",
         "rule": {"kind": "consecutive_days", "min_duration_seconds": 1200},
         "unlock": {"min_total_sessions": 0, "requires_pro": false,
                    "requires_completed": ["survive_withdrawal"]}}
    ]}
"""
import json
import logging
from pathlib import Path
from typing import Any

from progression.core.config import get_settings
from progression.core.exceptions import CatalogValidationError
from progression.infrastructure.challenge.catalog import (
    ChallengeCatalog,
    ChallengeDefinition,
    UnlockRule,
    default_catalog,
)
from progression.infrastructure.challenge.rules import ProgressRule

logger = logging.getLogger(__name__)

_RULE_FIELDS = ("kind", "min_duration_seconds", "metric", "threshold", "protection_level")


def _get_config_path() -> Path | None:
    path = get_settings().challenge_catalog_path
    if path:
        return Path(path)
    return None


def _load_raw_config(path: Path) -> dict[str, Any]:
    """설정 파일(JSON) 로드. 실패하면 빈 구조 반환."""
    if not path.is_file():
        logger.warning("[challenge] catalog config not found at %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("[challenge] Failed to load catalog config: %s", e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("[challenge] catalog config must be a JSON object")
        return {}
    return raw


def _section(item: dict[str, Any], name: str, index: int) -> dict[str, Any]:
    value = item.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CatalogValidationError(f"challenge #{index}: '{name}' must be an object")
    return value


def _build_definition(item: dict[str, Any], index: int) -> ChallengeDefinition:
    if not isinstance(item, dict):
        raise CatalogValidationError(f"challenge #{index}: must be an object")
    rule_raw = _section(item, "rule", index)
    unlock_raw = _section(item, "unlock", index)
    requires_completed = unlock_raw.get("requires_completed", [])
    if not isinstance(requires_completed, list):
        raise CatalogValidationError(f"challenge #{index}: 'requires_completed' must be a list of ids")
    try:
        rule = ProgressRule(**{k: rule_raw[k] for k in _RULE_FIELDS if k in rule_raw})
        unlock = UnlockRule(
            min_total_sessions=int(unlock_raw.get("min_total_sessions", 0)),
            requires_pro=bool(unlock_raw.get("requires_pro", False)),
            requires_completed=tuple(str(dep) for dep in requires_completed),
        )
        return ChallengeDefinition(
            id=str(item["id"]),
            title=str(item.get("title", item["id"])),
            target=int(item["target"]),
            rule=rule,
            unlock=unlock,
            is_pro=bool(item.get("is_pro", False)),
            icon=str(item.get("icon", "")),
            description=str(item.get("description", "")),
        )
    except CatalogValidationError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise CatalogValidationError(f"challenge #{index}: {e}") from e


def build_catalog(raw: dict[str, Any]) -> ChallengeCatalog:
    """JSON 구조 → 검증된 카탈로그. 잘못된 구성이면 CatalogValidationError."""
    items = raw.get("challenges")
    if not isinstance(items, list) or not items:
        raise CatalogValidationError("catalog config must define a non-empty 'challenges' list")
    return ChallengeCatalog([_build_definition(item, i) for i, item in enumerate(items, start=1)])


def load_catalog() -> ChallengeCatalog:
    """설정 파일 기준으로 카탈로그를 새로 빌드(캐시 미사용). 잘못된 설정이면 경고 후 기본 카탈로그."""
    path = _get_config_path()
    if path is None:
        return default_catalog()
    raw = _load_raw_config(path)
    if not raw:
        return default_catalog()
    try:
        catalog = build_catalog(raw)
    except CatalogValidationError as e:
        logger.warning("[challenge] invalid catalog config at %s, using defaults: %s", path, e)
        return default_catalog()
    logger.info("[challenge] loaded %s challenges from %s", len(catalog), path)
    return catalog


# 최초 1회 빌드(캐시). 설정 변경 시 reload_catalog() 호출
_catalog_cached: ChallengeCatalog | None = None


def get_catalog() -> ChallengeCatalog:
    """캐시된 load_catalog() 결과."""
    global _catalog_cached
    if _catalog_cached is None:
        _catalog_cached = load_catalog()
    return _catalog_cached


def reload_catalog() -> ChallengeCatalog:
    """설정 리로드(운영 중 변경 반영용)."""
    global _catalog_cached
    _catalog_cached = None
    return get_catalog()
