# intervium/services/attempt_store.py
"""
Record store adapter for interview attempts.

Wraps a request-scoped SQLAlchemy ``Session`` and exposes the query,
count, grouped-average and extremal primitives the recommendation and
statistics code is written against. Every ``SQLAlchemyError`` is logged and
re-raised as ``StoreUnavailable``; nothing is retried here.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from intervium.errors import StoreUnavailable
from intervium.models.interview import InterviewAttempt, STATUS_COMPLETED

logger = logging.getLogger(__name__)

GROUP_KEYS = ("profession_id", "character_id")
SCORE_FIELDS = ("overall_score", "technical_score", "communication_score", "detailedness")

# 소유자가 수정할 수 있는 필드
UPDATABLE_FIELDS = (
    "overall_score",
    "technical_score",
    "communication_score",
    "detailedness",
    "feedback",
    "strengths",
    "improvements",
    "recommendation",
    "status",
)


@dataclass
class GroupRow:
    key: Optional[str]
    count: int
    means: Dict[str, Optional[float]] = field(default_factory=dict)


def _column(name: str, allowed: Sequence[str]):
    if name not in allowed:
        raise ValueError(f"unsupported field: {name}")
    return getattr(InterviewAttempt, name)


class AttemptStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, op: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("[STORE] %s failed: %s", op, e)
            raise StoreUnavailable(detail={"operation": op}) from e

    def _owned(self, user_id: str, status: Optional[str] = None):
        q = self.db.query(InterviewAttempt).filter(InterviewAttempt.user_id == user_id)
        if status:
            q = q.filter(InterviewAttempt.status == status)
        return q

    # ---------- CRUD ----------
    def create(self, user_id: str, **values) -> InterviewAttempt:
        with self._guard("create"):
            attempt = InterviewAttempt(user_id=user_id, **values)
            self.db.add(attempt)
            self.db.flush()  # PK 채우기 + duration 계산
            self.db.refresh(attempt)
            return attempt

    def get(self, attempt_id: int) -> Optional[InterviewAttempt]:
        with self._guard("get"):
            return self.db.get(InterviewAttempt, attempt_id)

    def update(self, attempt: InterviewAttempt, changes: Dict) -> InterviewAttempt:
        with self._guard("update"):
            for name, value in changes.items():
                if name not in UPDATABLE_FIELDS:
                    raise ValueError(f"field is not updatable: {name}")
                setattr(attempt, name, value)
            self.db.flush()
            self.db.refresh(attempt)
            return attempt

    def delete(self, attempt: InterviewAttempt) -> None:
        with self._guard("delete"):
            self.db.delete(attempt)
            self.db.flush()

    def list_page(
        self,
        user_id: str,
        status: Optional[str] = None,
        profession_id: Optional[str] = None,
        limit: int = 10,
        page: int = 1,
    ) -> Tuple[List[InterviewAttempt], int]:
        with self._guard("list_page"):
            q = self._owned(user_id, status)
            if profession_id:
                q = q.filter(InterviewAttempt.profession_id == profession_id)
            total = q.count()
            items = (
                q.order_by(InterviewAttempt.created_at.desc(), InterviewAttempt.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return items, total

    # ---------- 분석용 primitive ----------
    def find_recent(
        self,
        user_id: str,
        limit: int,
        status: Optional[str] = None,
    ) -> List[InterviewAttempt]:
        """Newest first; ties on created_at fall back to insertion order."""
        with self._guard("find_recent"):
            return (
                self._owned(user_id, status)
                .order_by(InterviewAttempt.created_at.desc(), InterviewAttempt.id.desc())
                .limit(limit)
                .all()
            )

    def count_where(
        self,
        user_id: str,
        status: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> int:
        with self._guard("count_where"):
            q = self._owned(user_id, status)
            if since is not None:
                q = q.filter(InterviewAttempt.created_at >= since)
            return q.count()

    def group_average(
        self,
        user_id: str,
        group_key: Optional[str],
        fields: Sequence[str],
        status: Optional[str] = STATUS_COMPLETED,
        limit: Optional[int] = None,
    ) -> List[GroupRow]:
        """
        Grouped count + AVG per field, sorted by count desc then key.

        ``group_key=None`` aggregates everything into a single row and returns
        an empty list when there is nothing to aggregate. AVG ignores NULLs,
        so a field absent from every row of a group comes back as ``None``.
        """
        avg_cols = [func.avg(_column(name, SCORE_FIELDS)).label(name) for name in fields]
        count_col = func.count(InterviewAttempt.id).label("count")

        with self._guard("group_average"):
            if group_key is None:
                q = self.db.query(count_col, *avg_cols).filter(InterviewAttempt.user_id == user_id)
                if status:
                    q = q.filter(InterviewAttempt.status == status)
                row = q.one()
                if not row.count:
                    return []
                return [GroupRow(None, row.count, {name: getattr(row, name) for name in fields})]

            key_col = _column(group_key, GROUP_KEYS)
            q = self.db.query(key_col.label("key"), count_col, *avg_cols).filter(
                InterviewAttempt.user_id == user_id
            )
            if status:
                q = q.filter(InterviewAttempt.status == status)
            q = q.group_by(key_col).order_by(count_col.desc(), key_col.asc())
            if limit:
                q = q.limit(limit)
            return [
                GroupRow(row.key, row.count, {name: getattr(row, name) for name in fields})
                for row in q.all()
            ]

    def find_extremal(
        self,
        user_id: str,
        field_name: str,
        direction: str = "desc",
        status: Optional[str] = STATUS_COMPLETED,
    ) -> Optional[InterviewAttempt]:
        col = _column(field_name, SCORE_FIELDS)
        order = col.desc() if direction == "desc" else col.asc()
        with self._guard("find_extremal"):
            return (
                self._owned(user_id, status)
                .filter(col.isnot(None))
                .order_by(order, InterviewAttempt.id.asc())
                .first()
            )
