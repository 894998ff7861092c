"""사용자/평가 레코드 저장소.

- Storage: 라우터와 생애주기 드라이버가 의존하는 인터페이스
- MemStorage: 프로세스 메모리(dict) 기반 기본 구현
- SqlStorage: SQLAlchemy ORM 기반 구현 (STORAGE_BACKEND=sql)

두 구현 모두 ID 발급과 읽기-병합-쓰기를 락 하나로 묶는다.
동시에 create를 호출해도 같은 ID가 두 번 나오지 않는다.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from presentation_coach.core.exceptions import EvaluationFinalizedError
from presentation_coach.models.evaluation import EvaluationRow
from presentation_coach.models.user import UserRow
from presentation_coach.schemas.evaluation import (
    Evaluation,
    EvaluationCreate,
    EvaluationStatus,
    EvaluationUpdate,
)
from presentation_coach.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Storage(ABC):
    """저장소 인터페이스. 없는 레코드는 예외 대신 None 으로 알린다."""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User:
        """중복 username 검사는 호출하는 쪽(라우터)에서 먼저 한다."""

    @abstractmethod
    def get_evaluation(self, evaluation_id: int) -> Optional[Evaluation]: ...

    @abstractmethod
    def get_evaluations_by_user_id(self, user_id: int) -> List[Evaluation]:
        """created_at 내림차순(최신순). 시각이 같으면 먼저 만든 것이 앞."""

    @abstractmethod
    def create_evaluation(self, data: EvaluationCreate) -> Evaluation: ...

    @abstractmethod
    def update_evaluation(
        self, evaluation_id: int, update: EvaluationUpdate
    ) -> Optional[Evaluation]:
        """update에 명시된 필드만 덮어쓴다.

        - 없는 ID면 None (새 레코드를 만들지 않는다)
        - 이미 completed/failed 인 레코드면 EvaluationFinalizedError
        """


class MemStorage(Storage):
    def __init__(self):
        self._users: Dict[int, User] = {}
        self._evaluations: Dict[int, Evaluation] = {}
        self._user_id_counter = 1
        self._evaluation_id_counter = 1
        self._lock = threading.Lock()

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.model_copy()
        return None

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            user_id = self._user_id_counter
            self._user_id_counter += 1
            user = User(id=user_id, **data.model_dump())
            self._users[user_id] = user
            return user.model_copy()

    def get_evaluation(self, evaluation_id: int) -> Optional[Evaluation]:
        with self._lock:
            evaluation = self._evaluations.get(evaluation_id)
            return evaluation.model_copy(deep=True) if evaluation else None

    def get_evaluations_by_user_id(self, user_id: int) -> List[Evaluation]:
        with self._lock:
            owned = [
                e.model_copy(deep=True)
                for e in self._evaluations.values()
                if e.user_id == user_id
            ]
        # sorted()는 안정 정렬이라 reverse=True 여도 동률은 삽입 순서를 유지한다.
        return sorted(owned, key=lambda e: e.created_at, reverse=True)

    def create_evaluation(self, data: EvaluationCreate) -> Evaluation:
        with self._lock:
            evaluation_id = self._evaluation_id_counter
            self._evaluation_id_counter += 1
            evaluation = Evaluation(
                id=evaluation_id,
                created_at=_now(),
                status=EvaluationStatus.PROCESSING,
                **data.model_dump(),
            )
            self._evaluations[evaluation_id] = evaluation
            return evaluation.model_copy(deep=True)

    def update_evaluation(
        self, evaluation_id: int, update: EvaluationUpdate
    ) -> Optional[Evaluation]:
        with self._lock:
            current = self._evaluations.get(evaluation_id)
            if current is None:
                return None
            if current.status.is_terminal:
                raise EvaluationFinalizedError(evaluation_id, current.status.value)

            merged = {**current.model_dump(), **update.changes()}
            updated = Evaluation.model_validate(merged)
            self._evaluations[evaluation_id] = updated
            return updated.model_copy(deep=True)


class SqlStorage(Storage):
    """SQLAlchemy 세션을 작업마다 하나씩 열어서 사용하는 저장소."""

    def __init__(self, session_factory):
        self._session_factory = session_factory
        # 메모리 SQLite는 연결 하나를 공유하므로 작업 단위로 직렬화한다.
        self._lock = threading.RLock()

    @staticmethod
    def _to_evaluation(row) -> Evaluation:
        evaluation = Evaluation.model_validate(row)
        # SQLite는 타임존 정보를 저장하지 않는다.
        if evaluation.created_at.tzinfo is None:
            evaluation = evaluation.model_copy(
                update={"created_at": evaluation.created_at.replace(tzinfo=timezone.utc)}
            )
        return evaluation

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock, self._session_factory() as db:
            row = db.get(UserRow, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock, self._session_factory() as db:
            row = db.query(UserRow).filter(UserRow.username == username).first()
            return User.model_validate(row) if row else None

    def create_user(self, data: UserCreate) -> User:
        with self._lock, self._session_factory() as db:
            row = UserRow(username=data.username, password=data.password)
            db.add(row)
            db.commit()
            db.refresh(row)
            return User.model_validate(row)

    def get_evaluation(self, evaluation_id: int) -> Optional[Evaluation]:
        with self._lock, self._session_factory() as db:
            row = db.get(EvaluationRow, evaluation_id)
            return self._to_evaluation(row) if row else None

    def get_evaluations_by_user_id(self, user_id: int) -> List[Evaluation]:
        with self._lock, self._session_factory() as db:
            rows = (
                db.query(EvaluationRow)
                .filter(EvaluationRow.user_id == user_id)
                .order_by(EvaluationRow.created_at.desc(), EvaluationRow.id.asc())
                .all()
            )
            return [self._to_evaluation(row) for row in rows]

    def create_evaluation(self, data: EvaluationCreate) -> Evaluation:
        with self._lock, self._session_factory() as db:
            row = EvaluationRow(
                user_id=data.user_id,
                title=data.title,
                video_url=data.video_url,
                created_at=_now(),
                status=EvaluationStatus.PROCESSING.value,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._to_evaluation(row)

    def update_evaluation(
        self, evaluation_id: int, update: EvaluationUpdate
    ) -> Optional[Evaluation]:
        with self._lock, self._session_factory() as db:
            row = db.get(EvaluationRow, evaluation_id)
            if row is None:
                return None
            if EvaluationStatus(row.status).is_terminal:
                raise EvaluationFinalizedError(evaluation_id, row.status)

            # JSON 컬럼에 들어갈 값이므로 json 모드로 직렬화한다.
            for field, value in update.model_dump(mode="json", exclude_unset=True).items():
                setattr(row, field, value)
            db.commit()
            db.refresh(row)
            return self._to_evaluation(row)


def build_storage(settings) -> Storage:
    """설정값(STORAGE_BACKEND)에 맞는 저장소를 만든다."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.info("🗄️  메모리 저장소 사용")
        return MemStorage()
    if backend == "sql":
        from presentation_coach.database import create_session_factory

        return SqlStorage(create_session_factory(settings.DATABASE_URL))
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
