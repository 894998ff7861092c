"""Evaluation 관련 Pydantic 스키마 정의 파일.

- 응답 JSON은 프론트엔드에 맞춰 camelCase(overallScore, videoUrl ...)로 내려간다.
- 파이썬 코드 안에서는 snake_case 속성 이름을 그대로 사용한다.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        # snake_case 이름으로도 값을 넣을 수 있게 허용
        populate_by_name = True
        from_attributes = True


class EvaluationStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not EvaluationStatus.PROCESSING


class FeedbackType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class FeedbackItem(CamelModel):
    type: FeedbackType
    message: str
    # 영상 재생 중 표시할 위치(초)
    timestamp: Optional[int] = None


class ExpressionDistribution(CamelModel):
    """표정 분포(%). 7개 항목의 합은 100."""

    neutral: int = 0
    happy: int = 0
    sad: int = 0
    angry: int = 0
    fearful: int = 0
    disgusted: int = 0
    surprised: int = 0

    def total(self) -> int:
        return sum(self.model_dump().values())


class TimelinePoint(CamelModel):
    time: str  # "m:ss"
    confidence: int


class AnalysisDetails(CamelModel):
    """차트용 상세 분석 데이터."""

    expression_distribution: ExpressionDistribution
    timeline: List[TimelinePoint]
    eye_contact_percentage: Optional[int] = None
    posture_feedback: Optional[List[str]] = None
    gesture_feedback: Optional[List[str]] = None


class EvaluationCreate(CamelModel):
    user_id: Optional[int] = None
    title: str
    video_url: str


class EvaluationUpdate(CamelModel):
    """부분 업데이트. 명시적으로 넣은 필드만 기존 레코드를 덮어쓴다."""

    status: Optional[EvaluationStatus] = None
    overall_score: Optional[int] = Field(default=None, ge=0, le=100)
    confidence_score: Optional[int] = Field(default=None, ge=0, le=100)
    facial_expressions_score: Optional[int] = Field(default=None, ge=0, le=100)
    eye_contact_score: Optional[int] = Field(default=None, ge=0, le=100)
    body_language_score: Optional[int] = Field(default=None, ge=0, le=100)
    feedback: Optional[List[FeedbackItem]] = None
    analysis_details: Optional[AnalysisDetails] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Evaluation(CamelModel):
    """영상 한 개의 분석 생애주기를 나타내는 레코드 (응답 스키마 겸용)."""

    id: int
    user_id: Optional[int] = None
    title: str
    video_url: str
    created_at: datetime
    status: EvaluationStatus = EvaluationStatus.PROCESSING
    overall_score: Optional[int] = Field(default=None, ge=0, le=100)
    confidence_score: Optional[int] = Field(default=None, ge=0, le=100)
    facial_expressions_score: Optional[int] = Field(default=None, ge=0, le=100)
    eye_contact_score: Optional[int] = Field(default=None, ge=0, le=100)
    body_language_score: Optional[int] = Field(default=None, ge=0, le=100)
    feedback: Optional[List[FeedbackItem]] = None
    analysis_details: Optional[AnalysisDetails] = None
