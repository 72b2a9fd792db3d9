"""
챌린지 카탈로그 — 불변 정의(ChallengeDefinition) 목록.
각 정의는 순수 진행도 규칙(compute_progress)과 순수 잠금 해제 조건(is_unlocked)을 가진다.
다른 챌린지 참조는 위치가 아니라 id로 하며, 카탈로그 생성 시 존재·비순환을 검증한다.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence

from progression.core.exceptions import CatalogValidationError
from progression.domains.session.schemas import ProtectionLevel, SessionRecord
from progression.infrastructure.challenge.constants import (
    BLINK_MASTER_UNLOCK_SESSIONS,
    HIGH_FOCUS_BLINK_SCORE,
    HIGH_STILLNESS_PERCENT,
    LONG_SESSION_SECONDS,
    RUTHLESS_UNLOCK_SESSIONS,
)
from progression.infrastructure.challenge.rules import (
    MetricName,
    ProgressRule,
    consecutive_days,
    distinct_days,
    metric_threshold,
    protection_level_count,
    streak_length,
)
from progression.infrastructure.streak.schemas import StreakData


@dataclass(frozen=True)
class UnlockContext:
    """잠금 해제 조건이 볼 수 있는 파생 값 스냅샷."""

    total_completed_sessions: int
    is_pro_subscriber: bool
    completed: Mapping[str, bool] = field(default_factory=dict)

    def is_completed(self, challenge_id: str) -> bool:
        return bool(self.completed.get(challenge_id, False))


@dataclass(frozen=True)
class UnlockRule:
    """
    선언적 잠금 해제 조건 — 모든 조건을 만족해야 해제(AND). 빈 규칙은 항상 해제.
    """

    min_total_sessions: int = 0
    requires_pro: bool = False
    requires_completed: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "requires_completed", tuple(self.requires_completed))

    def evaluate(self, ctx: UnlockContext) -> bool:
        if ctx.total_completed_sessions < self.min_total_sessions:
            return False
        if self.requires_pro and not ctx.is_pro_subscriber:
            return False
        return all(ctx.is_completed(dep) for dep in self.requires_completed)


ALWAYS_UNLOCKED = UnlockRule()


@dataclass(frozen=True)
class ChallengeDefinition:
    id: str
    title: str
    target: int
    rule: ProgressRule
    unlock: UnlockRule = ALWAYS_UNLOCKED
    is_pro: bool = False
    icon: str = ""
    description: str = ""

    def compute_progress(self, sessions: Sequence[SessionRecord], streak: StreakData) -> int:
        return self.rule.compute(sessions, streak, self.target)

    def is_unlocked(self, ctx: UnlockContext) -> bool:
        return self.unlock.evaluate(ctx)

    @property
    def dependencies(self) -> tuple[str, ...]:
        return self.unlock.requires_completed


class ChallengeCatalog:
    """
    순서가 고정된 불변 챌린지 정의 목록.
    생성 시 검증: 고유 id, target >= 1, 참조 id 존재, 자기 참조·순환 의존 없음.
    """

    def __init__(self, definitions: Sequence[ChallengeDefinition]) -> None:
        self._definitions: tuple[ChallengeDefinition, ...] = tuple(definitions)
        by_id: dict[str, ChallengeDefinition] = {}
        for d in self._definitions:
            if not d.id:
                raise CatalogValidationError("challenge id must not be empty")
            if d.id in by_id:
                raise CatalogValidationError(f"duplicate challenge id '{d.id}'")
            if d.target < 1:
                raise CatalogValidationError(f"challenge '{d.id}': target must be >= 1")
            by_id[d.id] = d
        self._by_id = MappingProxyType(by_id)
        self._validate_dependencies()

    def _validate_dependencies(self) -> None:
        for d in self._definitions:
            for dep in d.dependencies:
                if dep == d.id:
                    raise CatalogValidationError(f"challenge '{d.id}' depends on itself")
                if dep not in self._by_id:
                    raise CatalogValidationError(f"challenge '{d.id}' depends on unknown challenge '{dep}'")

        # DFS 3색 표시로 순환 탐지
        visiting, done = 1, 2
        state: dict[str, int] = {}

        def visit(node: str, path: list[str]) -> None:
            mark = state.get(node)
            if mark == done:
                return
            if mark == visiting:
                cycle = path[path.index(node):] + [node]
                raise CatalogValidationError(f"cyclic challenge dependency: {' -> '.join(cycle)}")
            state[node] = visiting
            for dep in self._by_id[node].dependencies:
                visit(dep, path + [node])
            state[node] = done

        for d in self._definitions:
            visit(d.id, [])

    def __iter__(self) -> Iterator[ChallengeDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, challenge_id: object) -> bool:
        return challenge_id in self._by_id

    def __getitem__(self, challenge_id: str) -> ChallengeDefinition:
        return self._by_id[challenge_id]

    def get(self, challenge_id: str) -> Optional[ChallengeDefinition]:
        return self._by_id.get(challenge_id)

    @property
    def ids(self) -> list[str]:
        return [d.id for d in self._definitions]

    def referenced_ids(self) -> list[str]:
        """다른 챌린지의 잠금 해제 조건이 참조하는 id (카탈로그 순서)."""
        referenced = {dep for d in self._definitions for dep in d.dependencies}
        return [d.id for d in self._definitions if d.id in referenced]


# ── 기본 카탈로그 ─────────────────────────────────────────────────

DEFAULT_DEFINITIONS: tuple[ChallengeDefinition, ...] = (
    ChallengeDefinition(
        id="survive_withdrawal",
        title="SURVIVE THE WITHDRAWAL",
        icon="⚡",
        description="3 sessions in your first 3 days. Get through the hardest part.",
        target=3,
        rule=distinct_days(),
    ),
    ChallengeDefinition(
        id="four_day_reset",
        title="THE FOUR DAY RESET",
        icon="🔄",
        description="4 days in a row. 20 minutes each. That's when your brain starts to change.",
        target=4,
        rule=consecutive_days(min_duration_seconds=LONG_SESSION_SECONDS),
        unlock=UnlockRule(requires_completed=("survive_withdrawal",)),
    ),
    ChallengeDefinition(
        id="blink_master",
        title="BLINK MASTER",
        icon="👁",
        description="Hit a focus score above 80 three times. Prove your eyes can stay open.",
        target=3,
        rule=metric_threshold(MetricName.BLINK_SCORE, HIGH_FOCUS_BLINK_SCORE),
        unlock=UnlockRule(min_total_sessions=BLINK_MASTER_UNLOCK_SESSIONS),
    ),
    ChallengeDefinition(
        id="stone_wall",
        title="THE STONE WALL",
        icon="🪨",
        description="Stillness above 90 for five sessions. Become unmovable.",
        target=5,
        is_pro=True,
        rule=metric_threshold(MetricName.STILLNESS_PERCENT, HIGH_STILLNESS_PERCENT),
        unlock=UnlockRule(requires_completed=("four_day_reset",)),
    ),
    ChallengeDefinition(
        id="two_week_rewire",
        title="TWO WEEK REWIRE",
        icon="📅",
        description="14 days straight. One session minimum. This is where real change happens.",
        target=14,
        is_pro=True,
        rule=streak_length(),
        unlock=UnlockRule(requires_completed=("four_day_reset",)),
    ),
    ChallengeDefinition(
        id="ruthless_survivor",
        title="RUTHLESS SURVIVOR",
        icon="💀",
        description="3 Ruthless Mode sessions completed. No quitting. No escape.",
        target=3,
        is_pro=True,
        rule=protection_level_count(ProtectionLevel.RUTHLESS),
        unlock=UnlockRule(min_total_sessions=RUTHLESS_UNLOCK_SESSIONS, requires_pro=True),
    ),
    ChallengeDefinition(
        id="full_rewire",
        title="THE FULL REWIRE",
        icon="👑",
        description="90 days. Every single day. This is the final boss.",
        target=90,
        is_pro=True,
        rule=streak_length(),
        unlock=UnlockRule(requires_completed=("two_week_rewire",)),
    ),
)


def default_catalog() -> ChallengeCatalog:
    return ChallengeCatalog(DEFAULT_DEFINITIONS)
