# intervium/services/history.py
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List

from intervium.models.interview import InterviewAttempt, STATUS_COMPLETED
from intervium.services.attempt_store import AttemptStore

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 10


@dataclass
class HistoryWindow:
    # 최신순 최근 N개 (상태 무관)
    recent: List[InterviewAttempt] = field(default_factory=list)
    # recent 중 completed + overall_score 있는 것 (최신순 유지)
    completed_scored: List[InterviewAttempt] = field(default_factory=list)
    usage: Counter = field(default_factory=Counter)

    @property
    def is_empty(self) -> bool:
        return not self.recent

    @property
    def scores(self) -> List[int]:
        return [a.overall_score for a in self.completed_scored]


def usage_counts(attempts) -> Counter:
    return Counter(a.character_id for a in attempts if a.character_id)


def load_history(store: AttemptStore, user_id: str, window: int = HISTORY_WINDOW) -> HistoryWindow:
    """
    Fetch the user's most recent attempts and reduce them to the signals the
    recommendation path needs. An empty window is a valid result for a new
    user; store failures propagate as ``StoreUnavailable``.
    """
    recent = store.find_recent(user_id, limit=window)
    completed_scored = [
        a for a in recent if a.status == STATUS_COMPLETED and a.overall_score is not None
    ]
    history = HistoryWindow(
        recent=recent,
        completed_scored=completed_scored,
        usage=usage_counts(recent),
    )
    logger.debug(
        "[HISTORY] user_id=%s recent=%d completed_scored=%d",
        user_id,
        len(recent),
        len(completed_scored),
    )
    return history
