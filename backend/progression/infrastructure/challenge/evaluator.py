"""
챌린지 평가 — 순수 함수형 2-pass 변환.
1) 카탈로그 순서대로 진행도·완료 여부 계산 (unlocked=False 임시값)
2) 1단계 결과를 id로 조회해 UnlockContext 구성 후 잠금 해제 여부 결정

입력을 변경하지 않으며 동일 입력 → 동일 출력(결정적·멱등). 저장 상태 없음.
"""
from typing import Iterable, Optional

from progression.domains.session.schemas import SessionRecord
from progression.infrastructure.challenge.catalog import ChallengeCatalog, UnlockContext
from progression.infrastructure.challenge.catalog_config import get_catalog
from progression.infrastructure.challenge.schemas import EvaluatedChallenge
from progression.infrastructure.streak.schemas import StreakData


class ChallengeEvaluator:
    """공유 가변 상태가 없으므로 여러 reader가 동시에 호출해도 안전하다."""

    def __init__(self, catalog: Optional[ChallengeCatalog] = None) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> ChallengeCatalog:
        return self._catalog if self._catalog is not None else get_catalog()

    @staticmethod
    def _progress_pass(
        catalog: ChallengeCatalog,
        sessions: tuple[SessionRecord, ...],
        streak_data: StreakData,
    ) -> list[EvaluatedChallenge]:
        results = []
        for definition in catalog:
            progress = definition.compute_progress(sessions, streak_data)
            results.append(
                EvaluatedChallenge(
                    id=definition.id,
                    title=definition.title,
                    icon=definition.icon,
                    description=definition.description,
                    target=definition.target,
                    is_pro=definition.is_pro,
                    progress=progress,
                    completed=progress >= definition.target,
                    unlocked=False,
                )
            )
        return results

    @staticmethod
    def _build_context(
        catalog: ChallengeCatalog,
        provisional: list[EvaluatedChallenge],
        total_completed_sessions: int,
        is_pro_subscriber: bool,
    ) -> UnlockContext:
        completed_by_id = {r.id: r.completed for r in provisional}
        return UnlockContext(
            total_completed_sessions=total_completed_sessions,
            is_pro_subscriber=is_pro_subscriber,
            completed={cid: completed_by_id[cid] for cid in catalog.referenced_ids()},
        )

    def evaluate_all(
        self,
        sessions: Iterable[SessionRecord],
        streak_data: StreakData,
        is_pro_subscriber: bool,
    ) -> list[EvaluatedChallenge]:
        catalog = self.catalog
        history = tuple(sessions)
        total_completed = sum(1 for s in history if s.completed)

        provisional = self._progress_pass(catalog, history, streak_data)
        ctx = self._build_context(catalog, provisional, total_completed, bool(is_pro_subscriber))
        return [
            result.model_copy(update={"unlocked": catalog[result.id].is_unlocked(ctx)})
            for result in provisional
        ]


def evaluate_all(
    sessions: Iterable[SessionRecord],
    streak_data: StreakData,
    is_pro_subscriber: bool,
    catalog: Optional[ChallengeCatalog] = None,
) -> list[EvaluatedChallenge]:
    """세션 기록 + StreakData + 구독 여부 → 카탈로그 순서의 평가 결과."""
    return ChallengeEvaluator(catalog).evaluate_all(sessions, streak_data, is_pro_subscriber)
