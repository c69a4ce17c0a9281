# intervium/routers/interviews.py
import logging
import math

from fastapi import APIRouter, Depends, Query

from intervium.deps import get_current_user, get_store
from intervium.errors import Forbidden, NotFound
from intervium.models.interview import InterviewAttempt, STATUS_COMPLETED, STATUSES
from intervium.schemas.interview import (
    InterviewCreateRequest,
    InterviewOut,
    InterviewUpdateRequest,
    RecentInterviewOut,
)
from intervium.services.attempt_store import AttemptStore
from intervium.services.identifiers import ensure_attempt_id
from intervium.services.numbers import as_utc, utcnow
from intervium.services.statistics import aggregate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/interviews", tags=["interviews"])

RECENT_LIMIT = 5


def _serialize(attempt: InterviewAttempt) -> dict:
    return InterviewOut.model_validate(attempt).model_dump(mode="json", by_alias=True)


# 면접 조회 + 소유권 확인
def _get_owned(store: AttemptStore, raw_id: str, user_id: str) -> InterviewAttempt:
    attempt_id = ensure_attempt_id(raw_id)
    attempt = store.get(attempt_id)
    if attempt is None:
        raise NotFound("interview_not_found", detail={"id": attempt_id})
    if attempt.user_id != user_id:
        raise Forbidden("forbidden", detail="User not authorized to access this interview")
    return attempt


# 1) 통계 / 최근 면접 (":id" 라우트보다 먼저 등록)
@router.get("/stats")
def get_user_stats(
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    report = aggregate(store, current["id"])
    return {"success": True, "data": report.to_payload()}


@router.get("/recent")
def get_recent_interviews(
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    items = store.find_recent(current["id"], limit=RECENT_LIMIT, status=STATUS_COMPLETED)
    return {
        "success": True,
        "count": len(items),
        "data": [
            RecentInterviewOut.model_validate(a).model_dump(mode="json", by_alias=True)
            for a in items
        ],
    }


# 2) CRUD
@router.post("", status_code=201)
def create_interview(
    payload: InterviewCreateRequest,
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    now = utcnow()
    attempt = store.create(
        current["id"],
        status=STATUS_COMPLETED,
        started_at=as_utc(payload.started_at) or now,
        completed_at=now,
        **payload.to_record(),
    )
    logger.info(
        "[INTERVIEW] created id=%s user_id=%s profession=%s character=%s score=%s",
        attempt.id,
        current["id"],
        attempt.profession_id,
        attempt.character_id,
        attempt.overall_score,
    )
    return {"success": True, "message": "interview_saved", "data": _serialize(attempt)}


@router.get("")
def list_interviews(
    status: str | None = Query(None),
    profession_id: str | None = Query(None, alias="professionId"),
    limit: int = Query(10, ge=1, le=100),
    page: int = Query(1, ge=1),
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    if status and status not in STATUSES:
        # 알 수 없는 상태는 결과 없음
        return {"success": True, "count": 0, "total": 0, "page": page, "pages": 0, "data": []}

    items, total = store.list_page(
        current["id"],
        status=status,
        profession_id=profession_id,
        limit=limit,
        page=page,
    )
    return {
        "success": True,
        "count": len(items),
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit),
        "data": [_serialize(a) for a in items],
    }


@router.get("/{interview_id}")
def get_interview(
    interview_id: str,
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    attempt = _get_owned(store, interview_id, current["id"])
    return {"success": True, "data": _serialize(attempt)}


@router.put("/{interview_id}")
def update_interview(
    interview_id: str,
    payload: InterviewUpdateRequest,
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    attempt = _get_owned(store, interview_id, current["id"])
    attempt = store.update(attempt, payload.changes())
    return {"success": True, "message": "interview_updated", "data": _serialize(attempt)}


@router.delete("/{interview_id}")
def delete_interview(
    interview_id: str,
    current=Depends(get_current_user),
    store: AttemptStore = Depends(get_store),
):
    attempt = _get_owned(store, interview_id, current["id"])
    store.delete(attempt)
    logger.info("[INTERVIEW] deleted id=%s user_id=%s", attempt.id, current["id"])
    return {"success": True, "message": "interview_deleted", "data": {}}
