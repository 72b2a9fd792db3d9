"""진행 엔진 예외."""


class ProgressionError(Exception):
    """진행 엔진이 호출자에게 전달하는 예외의 기반 클래스."""


class CatalogValidationError(ProgressionError, ValueError):
    """챌린지 카탈로그 구성 오류 — 중복 id, 잘못된 target, 알 수 없는 참조, 순환 의존."""
