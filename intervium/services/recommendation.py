# intervium/services/recommendation.py
"""
다음 면접 캐릭터 추천.

    load_history  ->  policy (평균 점수 -> 난이도)  ->  select_character

policy / select_character 는 DB에 접근하지 않는 순수 함수.
"""
import logging
from dataclasses import dataclass
from numbers import Number
from typing import Mapping, Optional, Sequence

from intervium.errors import NotFound
from intervium.services.attempt_store import AttemptStore
from intervium.services.catalog import Catalog, Character, Tier
from intervium.services.history import load_history
from intervium.services.numbers import mean, round_half_up

logger = logging.getLogger(__name__)

# (하한, 난이도) - 위에서부터 처음 만족하는 구간
TIER_THRESHOLDS = (
    (80, Tier.EXTREME),
    (65, Tier.HARD),
    (50, Tier.MEDIUM),
)

FIRST_ATTEMPT_MESSAGE = "Recommended starter character for your first interview"


@dataclass(frozen=True)
class PolicyDecision:
    tier: Tier
    message: str
    average: Optional[float] = None

    @property
    def rounded_average(self) -> Optional[int]:
        return None if self.average is None else round_half_up(self.average)


def _score_of(item) -> Optional[float]:
    if item is None:
        return None
    if isinstance(item, Number):
        return float(item)
    if isinstance(item, Mapping):
        return item.get("overallScore", item.get("overall_score"))
    return getattr(item, "overall_score", None)


def tier_for_average(average: float) -> Tier:
    for lower_bound, tier in TIER_THRESHOLDS:
        if average >= lower_bound:
            return tier
    return Tier.EASY


def policy(completed_scored: Sequence) -> PolicyDecision:
    """
    Map the completed, scored attempts of a history window to a tier.

    Accepts attempts, ``{"overallScore": ...}`` mappings or bare numbers.
    Unweighted mean; thresholds have closed lower bounds.
    """
    average = mean(_score_of(item) for item in completed_scored)
    if average is None:
        return PolicyDecision(tier=Tier.EASY, message=FIRST_ATTEMPT_MESSAGE)

    tier = tier_for_average(average)
    message = (
        f"Your recent average score is {round_half_up(average)}. "
        f"Recommended level: {tier.value}"
    )
    return PolicyDecision(tier=tier, message=message, average=average)


def select_character(tier, usage: Optional[Mapping[str, int]], catalog: Catalog) -> Character:
    """
    Least-exposed character of ``tier``.

    No character at this tier -> the popular character (badge holder, else
    the first catalog entry). Otherwise the first unused candidate, else the
    first candidate with the strictly lowest usage count. Catalog order
    breaks every tie.
    """
    usage = usage or {}
    candidates = catalog.by_difficulty(tier)

    if not candidates:
        fallback = catalog.popular()
        if fallback is None:
            raise NotFound("no_characters_available", detail={"tier": str(getattr(tier, "value", tier))})
        return fallback

    for c in candidates:
        if usage.get(c.id, 0) == 0:
            return c

    best = candidates[0]
    best_count = usage.get(best.id, 0)
    for c in candidates[1:]:
        count = usage.get(c.id, 0)
        if count < best_count:
            best, best_count = c, count
    return best


@dataclass(frozen=True)
class Recommendation:
    decision: PolicyDecision
    character: Character
    total_interviews: int

    def to_payload(self) -> dict:
        payload = {
            "success": True,
            "message": self.decision.message,
            "data": self.character.model_dump(mode="json"),
        }
        if self.decision.average is not None:
            payload["stats"] = {
                "totalInterviews": self.total_interviews,
                "averageScore": self.decision.rounded_average,
                "recommendedLevel": self.decision.tier.value,
            }
        return payload


def recommend(store: AttemptStore, catalog: Catalog, user_id: str) -> Recommendation:
    history = load_history(store, user_id)
    decision = policy(history.completed_scored)
    character = select_character(decision.tier, history.usage, catalog)

    logger.info(
        "[RECOMMEND] user_id=%s tier=%s character=%s window=%d",
        user_id,
        decision.tier.value,
        character.id,
        len(history.recent),
    )
    return Recommendation(
        decision=decision,
        character=character,
        total_interviews=len(history.completed_scored),
    )
