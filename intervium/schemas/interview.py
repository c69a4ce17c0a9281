# intervium/schemas/interview.py
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from intervium.services.numbers import as_utc

Score = Annotated[int, Field(ge=0, le=100)]
ListItem = Annotated[str, Field(max_length=500)]
Status = Literal["in_progress", "completed", "cancelled"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _merge_legacy_weaknesses(data):
    # 구버전 클라이언트의 "weaknesses" == "improvements" (둘 다 오면 improvements 우선)
    if isinstance(data, dict) and "weaknesses" in data:
        data = dict(data)
        legacy = data.pop("weaknesses")
        if data.get("improvements") is None:
            data["improvements"] = legacy
    return data


# -- Request --

# 면접 결과 저장 - 요청
class InterviewCreateRequest(CamelModel):
    profession_id: str = Field(..., min_length=1, max_length=100, description="직무 ID")
    character_id: str = Field(..., min_length=1, max_length=100, description="면접관 캐릭터 ID")

    overall_score: Optional[Score] = None
    technical_score: Optional[Score] = None
    communication_score: Optional[Score] = None
    detailedness: Optional[Score] = None

    feedback: Optional[str] = Field(None, max_length=2000)
    strengths: Optional[List[ListItem]] = None
    improvements: Optional[List[ListItem]] = None
    recommendation: Optional[str] = None

    question_count: Optional[int] = Field(None, ge=0)
    correct_answers: Optional[int] = Field(None, ge=0)

    started_at: Optional[datetime] = Field(None, description="면접 시작 시각 (없으면 저장 시각)")
    duration: Optional[int] = Field(None, ge=0, description="분 단위, 없으면 서버에서 계산")

    @model_validator(mode="before")
    @classmethod
    def _legacy_aliases(cls, data):
        return _merge_legacy_weaknesses(data)

    def to_record(self) -> dict:
        """빈 값은 원래 앱과 동일하게 0 / "" / [] 로 채운다."""
        return {
            "profession_id": self.profession_id.strip(),
            "character_id": self.character_id.strip(),
            "overall_score": self.overall_score or 0,
            "technical_score": self.technical_score or 0,
            "communication_score": self.communication_score or 0,
            "detailedness": self.detailedness or 0,
            "feedback": self.feedback or "",
            "strengths": self.strengths or [],
            "improvements": self.improvements or [],
            "recommendation": self.recommendation or "",
            "question_count": self.question_count or 0,
            "correct_answers": self.correct_answers or 0,
            "duration": self.duration,
        }


# 면접 결과 수정 - 요청 (보낸 필드만 반영)
class InterviewUpdateRequest(CamelModel):
    overall_score: Optional[Score] = None
    technical_score: Optional[Score] = None
    communication_score: Optional[Score] = None
    detailedness: Optional[Score] = None
    feedback: Optional[str] = Field(None, max_length=2000)
    strengths: Optional[List[ListItem]] = None
    improvements: Optional[List[ListItem]] = None
    recommendation: Optional[str] = None
    status: Optional[Status] = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_aliases(cls, data):
        return _merge_legacy_weaknesses(data)

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        for name in ("strengths", "improvements"):
            if name in data and data[name] is None:
                data[name] = []
        if data.get("status", "") is None:
            del data["status"]
        return data


# -- Response --

class InterviewOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: str
    profession_id: str
    character_id: str
    status: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None
    overall_score: Optional[int] = None
    technical_score: Optional[int] = None
    communication_score: Optional[int] = None
    detailedness: Optional[int] = None
    feedback: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    recommendation: Optional[str] = None
    question_count: int = 0
    correct_answers: int = 0
    success_rate: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    normalize_tz = field_validator("started_at", "completed_at", "created_at", "updated_at")(as_utc)


# 최근 면접 (목록 카드용 요약)
class RecentInterviewOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    profession_id: str
    character_id: str
    overall_score: Optional[int] = None
    created_at: Optional[datetime] = None
    duration: Optional[int] = None

    normalize_tz = field_validator("created_at")(as_utc)
