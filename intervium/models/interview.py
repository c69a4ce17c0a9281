# intervium/models/interview.py
from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    String,
    Text,
    DateTime,
    JSON,
    Index,
    CheckConstraint,
    event,
    inspect,
)

from intervium.db.base import Base
from intervium.services.numbers import minutes_between, round_half_up, utcnow

STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUSES = (STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED)


class InterviewAttempt(Base):
    __tablename__ = "interviews"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)  # 토큰 sub, 생성 후 변경 불가

    # 카탈로그 참조 (FK 아님)
    profession_id = Column(String(100), nullable=False)
    character_id = Column(String(100), nullable=False)

    status = Column(String(20), nullable=False, default=STATUS_IN_PROGRESS)  # in_progress|completed|cancelled

    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=True)  # 분 단위

    # 결과 (0~100)
    overall_score = Column(Integer, nullable=True)
    technical_score = Column(Integer, nullable=True)
    communication_score = Column(Integer, nullable=True)
    detailedness = Column(Integer, nullable=True)

    feedback = Column(Text, nullable=True)
    strengths = Column(JSON, nullable=False, default=list)
    improvements = Column(JSON, nullable=False, default=list)
    recommendation = Column(Text, nullable=True)

    question_count = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    __table_args__ = (
        Index("ix_interviews_user_id_created_at", "user_id", "created_at"),
        Index("ix_interviews_profession_id", "profession_id"),
        Index("ix_interviews_status", "status"),
        Index("ix_interviews_overall_score", "overall_score"),
        CheckConstraint("duration IS NULL OR duration >= 0", name="ck_interviews_duration"),
        CheckConstraint("question_count >= 0", name="ck_interviews_question_count"),
        CheckConstraint("correct_answers >= 0", name="ck_interviews_correct_answers"),
    )

    @property
    def success_rate(self) -> int:
        if not self.question_count:
            return 0
        return round_half_up((self.correct_answers or 0) / self.question_count * 100)

    def __repr__(self) -> str:
        return f"<InterviewAttempt id={self.id} user={self.user_id} status={self.status}>"


def _fill_duration(target: InterviewAttempt, completed_changed: bool) -> None:
    if target.status == STATUS_COMPLETED and target.completed_at is None:
        target.completed_at = utcnow()
        completed_changed = True
    # 명시적으로 받은 duration은 유지, 없을 때만 한 번 계산
    if completed_changed and target.duration is None and target.completed_at and target.started_at:
        target.duration = minutes_between(target.started_at, target.completed_at)


@event.listens_for(InterviewAttempt, "before_insert")
def _before_insert(mapper, connection, target):
    if target.started_at is None:
        target.started_at = utcnow()
    _fill_duration(target, completed_changed=target.completed_at is not None)


@event.listens_for(InterviewAttempt, "before_update")
def _before_update(mapper, connection, target):
    state = inspect(target)
    completed_changed = state.attrs.completed_at.history.has_changes()
    _fill_duration(target, completed_changed=completed_changed)
