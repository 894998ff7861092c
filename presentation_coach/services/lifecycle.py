"""평가 생애주기 드라이버.

processing --(분석 성공)--> completed
processing --(분석 중 예외)--> failed

- submit_evaluation()은 processing 레코드를 만들고 바로 반환한다 (블로킹 없음).
- 실제 분석은 스레드 풀에서 한 번만 실행되며, 재시도는 하지 않는다.
- completed / failed 는 최종 상태라서 이후에는 어떤 수정도 일어나지 않는다.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Dict, Optional

from presentation_coach.core.exceptions import EvaluationNotFoundError
from presentation_coach.schemas.evaluation import (
    Evaluation,
    EvaluationCreate,
    EvaluationStatus,
    EvaluationUpdate,
)
from presentation_coach.services.analyzer import Analyzer
from presentation_coach.services.storage import Storage

logger = logging.getLogger(__name__)


def default_title(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Evaluation {now.strftime('%Y-%m-%d %H:%M:%S')}"


def build_completion_update(evaluation: Evaluation, analyzer: Analyzer) -> EvaluationUpdate:
    """현재 레코드 → completed 로 바꾸는 업데이트 (저장소는 건드리지 않는다)."""
    bundle = analyzer.evaluate(evaluation.video_url)
    return EvaluationUpdate(status=EvaluationStatus.COMPLETED, **bundle.model_dump())


class EvaluationLifecycle:
    """업로드된 영상의 평가를 만들고, 지연 후 분석 결과를 기록한다."""

    def __init__(
        self,
        storage: Storage,
        analyzer: Analyzer,
        delay_seconds: float = 5.0,
        max_workers: int = 4,
    ):
        self.storage = storage
        self.analyzer = analyzer
        self.delay_seconds = delay_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="evaluation"
        )
        self._stopping = threading.Event()
        self._pending: Dict[int, Future] = {}
        self._pending_lock = threading.Lock()

    def submit_evaluation(self, user_id: Optional[int], title: Optional[str], video_url: str) -> Evaluation:
        if not title or not title.strip():
            title = default_title()

        evaluation = self.storage.create_evaluation(
            EvaluationCreate(user_id=user_id, title=title.strip(), video_url=video_url)
        )
        future = self._executor.submit(self.complete_evaluation, evaluation.id)
        with self._pending_lock:
            self._pending[evaluation.id] = future
        future.add_done_callback(lambda _: self._forget(evaluation.id))

        logger.info("🎬 평가 %s 생성, %.1f초 후 분석 예정", evaluation.id, self.delay_seconds)
        return evaluation

    def complete_evaluation(self, evaluation_id: int) -> Optional[Evaluation]:
        """백그라운드 작업 본문. 예외는 밖으로 던지지 않고 failed 로 기록한다."""
        # 종료 신호가 오면 대기를 멈추고 레코드는 processing 으로 남긴다.
        if self._stopping.wait(self.delay_seconds):
            logger.warning("⚠️  종료 중이라 평가 %s 분석을 건너뜀", evaluation_id)
            return None

        try:
            evaluation = self.storage.get_evaluation(evaluation_id)
            if evaluation is None:
                raise EvaluationNotFoundError(evaluation_id)

            update = build_completion_update(evaluation, self.analyzer)
            updated = self.storage.update_evaluation(evaluation_id, update)
            if updated is None:
                raise EvaluationNotFoundError(evaluation_id)

            logger.info("✅ 평가 %s 분석 완료 (overall=%s)", evaluation_id, updated.overall_score)
            return updated
        except Exception:
            logger.exception("❌ 평가 %s 분석 실패", evaluation_id)
            return self._mark_failed(evaluation_id)

    def _mark_failed(self, evaluation_id: int) -> Optional[Evaluation]:
        try:
            return self.storage.update_evaluation(
                evaluation_id, EvaluationUpdate(status=EvaluationStatus.FAILED)
            )
        except Exception:
            logger.exception("❌ 평가 %s 를 failed 로 기록하지 못함", evaluation_id)
            return None

    def pending(self, evaluation_id: int) -> Optional[Future]:
        """아직 끝나지 않은 분석 작업의 Future (없으면 None)."""
        with self._pending_lock:
            return self._pending.get(evaluation_id)

    def _forget(self, evaluation_id: int) -> None:
        with self._pending_lock:
            self._pending.pop(evaluation_id, None)

    def shutdown(self, wait: bool = True) -> None:
        self._stopping.set()
        self._executor.shutdown(wait=wait)
