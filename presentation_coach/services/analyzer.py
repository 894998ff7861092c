"""발표 영상 분석기(Analyzer).

- 현재는 실제 얼굴/자세 모델이 없기 때문에 '그럴듯한 랜덤 결과'를 만들어 반환한다.
- 나중에 실제 모델(표정 인식, 포즈 추정)을 붙일 때는 Analyzer를 상속한 클래스를
  새로 만들고 evaluate()만 구현하면 된다. 생애주기 드라이버와 저장소는 그대로 둔다.
"""

import math
import random
from typing import List, Optional

from pydantic import BaseModel, Field

from presentation_coach.schemas.evaluation import (
    AnalysisDetails,
    ExpressionDistribution,
    FeedbackItem,
    FeedbackType,
    TimelinePoint,
)

# 종합 점수 가중치 (자신감, 표정, 시선, 몸짓)
SCORE_WEIGHTS = {
    "confidence": 0.25,
    "facial_expressions": 0.30,
    "eye_contact": 0.25,
    "body_language": 0.20,
}

# 항목별 점수 범위 (min, max)
SCORE_RANGES = {
    "confidence": (65, 95),
    "facial_expressions": (70, 90),
    "eye_contact": (60, 85),
    "body_language": (55, 90),
}


class ScoreBundle(BaseModel):
    """분석 한 번의 결과: 점수 5개 + 피드백 + 차트 데이터."""

    overall_score: int = Field(ge=0, le=100)
    confidence_score: int = Field(ge=0, le=100)
    facial_expressions_score: int = Field(ge=0, le=100)
    eye_contact_score: int = Field(ge=0, le=100)
    body_language_score: int = Field(ge=0, le=100)
    feedback: List[FeedbackItem]
    analysis_details: AnalysisDetails


class Analyzer:
    """영상 참조(경로/URL)를 받아 ScoreBundle을 돌려주는 분석기 인터페이스."""

    def evaluate(self, video_ref: str) -> ScoreBundle:
        raise NotImplementedError


def overall_score(confidence: int, facial: int, eye_contact: int, body: int) -> int:
    return round(
        confidence * SCORE_WEIGHTS["confidence"]
        + facial * SCORE_WEIGHTS["facial_expressions"]
        + eye_contact * SCORE_WEIGHTS["eye_contact"]
        + body * SCORE_WEIGHTS["body_language"]
    )


def format_time(seconds: float) -> str:
    """초 단위를 'm:ss' 문자열로 바꾼다."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


class SimulatedAnalyzer(Analyzer):
    """랜덤 기반 모의 분석기.

    매개변수:
        rng: random.Random 인스턴스 (테스트에서 seed 고정용)
        duration_seconds: 영상 길이를 읽지 않으므로 타임라인에 쓰는 기본 길이
    """

    def __init__(self, rng: Optional[random.Random] = None, duration_seconds: float = 60.0):
        self.rng = rng or random.Random()
        self.duration_seconds = duration_seconds

    def evaluate(self, video_ref: str) -> ScoreBundle:
        # video_ref는 실제 모델이 붙기 전까지 사용하지 않는다.
        confidence = self.weighted_score(*SCORE_RANGES["confidence"])
        facial = self.weighted_score(*SCORE_RANGES["facial_expressions"])
        eye_contact = self.weighted_score(*SCORE_RANGES["eye_contact"])
        body = self.weighted_score(*SCORE_RANGES["body_language"])

        details = AnalysisDetails(
            expression_distribution=self.expression_distribution(),
            timeline=self.timeline(self.duration_seconds),
            eye_contact_percentage=self.eye_contact_percentage(eye_contact),
            posture_feedback=posture_feedback(body),
            gesture_feedback=gesture_feedback(body),
        )

        return ScoreBundle(
            overall_score=overall_score(confidence, facial, eye_contact, body),
            confidence_score=confidence,
            facial_expressions_score=facial,
            eye_contact_score=eye_contact,
            body_language_score=body,
            feedback=self.feedback(confidence, facial, eye_contact, body),
            analysis_details=details,
        )

    def weighted_score(self, low: int, high: int) -> int:
        """범위 중앙을 평균으로 하는 정규분포 점수 (Box-Muller 변환).

        표준편차는 범위의 1/6 이므로 대부분 범위 안에 들어오고,
        벗어난 값은 양 끝으로 잘라낸다.
        """
        mean = (low + high) / 2
        std_dev = (high - low) / 6

        # random()은 0.0을 반환할 수 있으므로 log(0)을 피한다.
        u1 = 1.0 - self.rng.random()
        u2 = self.rng.random()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

        score = round(mean + z0 * std_dev)
        return max(low, min(high, score))

    def expression_distribution(self) -> ExpressionDistribution:
        neutral = 40 + self.rng.randrange(20)
        happy = 20 + self.rng.randrange(20)

        # 남은 비율을 나머지 표정에 나눠 준다.
        remaining = 100 - neutral - happy
        sad = math.floor(remaining * self.rng.random() * 0.30)
        angry = math.floor(remaining * self.rng.random() * 0.10)
        fearful = math.floor(remaining * self.rng.random() * 0.15)
        disgusted = math.floor(remaining * self.rng.random() * 0.05)
        # 내림으로 생긴 차이는 surprised가 가져가서 합계를 정확히 100으로 맞춘다.
        surprised = remaining - sad - angry - fearful - disgusted

        return ExpressionDistribution(
            neutral=neutral,
            happy=happy,
            sad=sad,
            angry=angry,
            fearful=fearful,
            disgusted=disgusted,
            surprised=surprised,
        )

    def timeline(self, duration: float) -> List[TimelinePoint]:
        """긴장한 시작, 중반 하락, 강한 마무리를 흉내 낸 자신감 곡선."""
        num_points = max(8, int(duration // 15))
        points = []

        for i in range(num_points):
            progress = i / (num_points - 1)
            if progress < 0.2:
                base = 60 + progress * 50
            elif progress < 0.4:
                base = 70 + (progress - 0.2) * 75
            elif progress < 0.6:
                base = 85 - (progress - 0.4) * 100
            elif progress < 0.8:
                base = 65 + (progress - 0.6) * 75
            else:
                base = 80 + (progress - 0.8) * 50

            confidence = round(base + self.rng.uniform(-5, 5))
            points.append(
                TimelinePoint(
                    time=format_time(duration * progress),
                    confidence=max(0, min(100, confidence)),
                )
            )

        return points

    def eye_contact_percentage(self, eye_contact: int) -> int:
        return round(max(0.0, min(100.0, eye_contact + self.rng.uniform(-5, 5))))

    def feedback(self, confidence: int, facial: int, eye_contact: int, body: int) -> List[FeedbackItem]:
        rng = self.rng
        items = []

        def add(kind, message, timestamp):
            items.append(FeedbackItem(type=kind, message=message, timestamp=timestamp))

        # 점수가 높은 항목은 칭찬
        if facial > 80:
            add(FeedbackType.POSITIVE, "Excellent use of facial expressions to engage audience.",
                rng.randrange(30))
        if eye_contact > 75:
            add(FeedbackType.POSITIVE, "Good eye contact maintained throughout most of the presentation.",
                rng.randrange(30) + 30)
        if body > 75:
            add(FeedbackType.POSITIVE, "Effective use of hand gestures to emphasize key points.",
                rng.randrange(30) + 60)
        if confidence > 80:
            add(FeedbackType.POSITIVE, "You appeared confident and well-prepared.",
                rng.randrange(30) + 90)

        # 점수가 낮은 항목은 개선점
        if facial < 75:
            add(FeedbackType.NEGATIVE, "Try to vary your facial expressions more to show enthusiasm.",
                rng.randrange(30) + 45)
        if eye_contact < 70:
            add(FeedbackType.NEGATIVE, "Maintain eye contact with the audience more consistently.",
                rng.randrange(30) + 75)
        if body < 70:
            add(FeedbackType.NEGATIVE, "Reduce fidgeting to appear more confident.",
                rng.randrange(30) + 15)
        if confidence < 75:
            add(FeedbackType.NEGATIVE, "Practice more to build confidence in your delivery.",
                rng.randrange(30) + 60)

        add(FeedbackType.NEUTRAL, "Your pace was appropriate for the content.", rng.randrange(120))
        add(FeedbackType.NEUTRAL, "Good vocal projection throughout the presentation.", rng.randrange(120))

        # 영상 재생 위치 순서대로 보여주기 위해 정렬
        return sorted(items, key=lambda item: item.timestamp or 0)


def posture_feedback(body: int) -> List[str]:
    return [
        "Excellent upright posture throughout presentation"
        if body > 75 else "Good posture during most of the presentation",
        "Tendency to fidget or make distracting movements"
        if body < 70 else "Occasional unnecessary movements",
    ]


def gesture_feedback(body: int) -> List[str]:
    return [
        "Effective use of hand gestures to emphasize points"
        if body > 70 else "Some effective use of gestures",
        "Could improve the purposefulness of gestures"
        if body < 65 else "Try to make gestures more deliberate and meaningful",
    ]
