"""발표 평가(Evaluation) 관련 DB 모델 정의 파일.

- 어떤 사용자가 어떤 영상을 올렸는지, 분석 상태와 점수를 함께 기록한다.
- 점수/피드백/상세 분석은 completed 상태가 되기 전까지 전부 NULL 이다.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from presentation_coach.database import Base


class EvaluationRow(Base):
    """evaluations 테이블에 해당하는 ORM 모델."""

    __tablename__ = "evaluations"

    id = Column(Integer, primary_key=True, index=True)

    # 외래 키 제약 없이 사용자 ID만 기록한다 (삭제 연쇄 없음)
    user_id = Column(Integer, nullable=True, index=True)

    title = Column(Text, nullable=False)

    # 서버에 저장된 영상의 URL 경로 (/uploads/<파일명>)
    video_url = Column(Text, nullable=False)

    # 생성 시각은 저장소가 직접 넣는다 (마이크로초까지 보존하기 위해)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # processing, completed, failed
    status = Column(String(20), nullable=False, default="processing")

    overall_score = Column(Integer, nullable=True)
    confidence_score = Column(Integer, nullable=True)
    facial_expressions_score = Column(Integer, nullable=True)
    eye_contact_score = Column(Integer, nullable=True)
    body_language_score = Column(Integer, nullable=True)

    feedback = Column(JSON, nullable=True)
    analysis_details = Column(JSON, nullable=True)
