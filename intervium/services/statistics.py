# intervium/services/statistics.py
"""
사용자 통계 (GET /api/v1/interviews/stats).

completed 상태의 면접 전체를 대상으로 한다 (최근 N개 제한 없음).
각 항목은 store 의 독립적인 조회로 계산하며, 하나라도 실패하면
StoreUnavailable 이 그대로 올라가고 부분 결과는 반환하지 않는다.

빈 값 규칙
- 숫자 필드: 0
- 객체 필드 (detailedScores, bestScore): None
- 목록 필드: []
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from intervium.models.interview import InterviewAttempt, STATUS_COMPLETED
from intervium.services.attempt_store import AttemptStore
from intervium.services.numbers import as_utc, round_half_up, utcnow

logger = logging.getLogger(__name__)

RECENT_DAYS = 7
PROFESSION_STATS_LIMIT = 5
TREND_LIMIT = 10


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DetailedScores(_CamelModel):
    technical: int = 0
    communication: int = 0
    detailedness: int = 0


class BestScore(_CamelModel):
    id: int
    score: int
    profession_id: str
    character_id: str
    date: datetime


class ProfessionStat(_CamelModel):
    profession_id: str
    count: int
    average_score: int
    average_technical: int


class CharacterStat(_CamelModel):
    character_id: str
    count: int
    average_score: int


class TrendPoint(_CamelModel):
    id: int
    overall_score: Optional[int] = None
    technical_score: Optional[int] = None
    communication_score: Optional[int] = None
    created_at: datetime


class StatsReport(_CamelModel):
    total_interviews: int = 0
    average_score: int = 0
    average_technical_score: int = 0
    detailed_scores: Optional[DetailedScores] = None
    best_score: Optional[BestScore] = None
    recent_interviews: int = 0
    profession_stats: List[ProfessionStat] = Field(default_factory=list)
    character_stats: List[CharacterStat] = Field(default_factory=list)
    progress_trend: List[TrendPoint] = Field(default_factory=list)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def _rounded(value) -> int:
    return 0 if value is None else round_half_up(value)


def _detailed_scores(store: AttemptStore, user_id: str) -> Optional[DetailedScores]:
    rows = store.group_average(
        user_id,
        group_key=None,
        fields=("technical_score", "communication_score", "detailedness"),
    )
    if not rows:
        return None
    means = rows[0].means
    return DetailedScores(
        technical=_rounded(means["technical_score"]),
        communication=_rounded(means["communication_score"]),
        detailedness=_rounded(means["detailedness"]),
    )


def _best_score(store: AttemptStore, user_id: str) -> Optional[BestScore]:
    best = store.find_extremal(user_id, "overall_score", direction="desc")
    if best is None:
        return None
    return BestScore(
        id=best.id,
        score=best.overall_score,
        profession_id=best.profession_id,
        character_id=best.character_id,
        date=as_utc(best.created_at),
    )


def _profession_stats(store: AttemptStore, user_id: str) -> List[ProfessionStat]:
    rows = store.group_average(
        user_id,
        group_key="profession_id",
        fields=("overall_score", "technical_score"),
        limit=PROFESSION_STATS_LIMIT,
    )
    return [
        ProfessionStat(
            profession_id=row.key,
            count=row.count,
            average_score=_rounded(row.means["overall_score"]),
            average_technical=_rounded(row.means["technical_score"]),
        )
        for row in rows
    ]


def _character_stats(store: AttemptStore, user_id: str) -> List[CharacterStat]:
    rows = store.group_average(user_id, group_key="character_id", fields=("overall_score",))
    return [
        CharacterStat(
            character_id=row.key,
            count=row.count,
            average_score=_rounded(row.means["overall_score"]),
        )
        for row in rows
    ]


def _trend_point(a: InterviewAttempt) -> TrendPoint:
    return TrendPoint(
        id=a.id,
        overall_score=a.overall_score,
        technical_score=a.technical_score,
        communication_score=a.communication_score,
        created_at=as_utc(a.created_at),
    )


def _progress_trend(store: AttemptStore, user_id: str) -> List[TrendPoint]:
    latest = store.find_recent(user_id, limit=TREND_LIMIT, status=STATUS_COMPLETED)
    # 조회는 최신순, 응답은 오래된 순 (차트용)
    return [_trend_point(a) for a in reversed(latest)]


def aggregate(store: AttemptStore, user_id: str, now: Optional[datetime] = None) -> StatsReport:
    now = now or utcnow()

    total = store.count_where(user_id, status=STATUS_COMPLETED)
    overall = store.group_average(user_id, group_key=None, fields=("overall_score", "technical_score"))
    overall_means = overall[0].means if overall else {}

    report = StatsReport(
        total_interviews=total,
        average_score=_rounded(overall_means.get("overall_score")),
        average_technical_score=_rounded(overall_means.get("technical_score")),
        detailed_scores=_detailed_scores(store, user_id),
        best_score=_best_score(store, user_id),
        recent_interviews=store.count_where(
            user_id,
            status=STATUS_COMPLETED,
            since=now - timedelta(days=RECENT_DAYS),
        ),
        profession_stats=_profession_stats(store, user_id),
        character_stats=_character_stats(store, user_id),
        progress_trend=_progress_trend(store, user_id),
    )
    logger.info(
        "[STATS] user_id=%s total=%d average=%d professions=%d characters=%d",
        user_id,
        report.total_interviews,
        report.average_score,
        len(report.profession_stats),
        len(report.character_stats),
    )
    return report
