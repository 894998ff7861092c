"""도메인 예외 정의 파일.

서비스 계층은 HTTP를 모르기 때문에 아래 예외만 던지고,
라우터에서 HTTPException(상태 코드)으로 변환한다.
"""


class CoachError(Exception):
    """이 패키지에서 던지는 모든 예외의 기본 클래스."""


class UsernameTakenError(CoachError):
    def __init__(self, username: str):
        super().__init__(f"Username already taken: {username}")
        self.username = username


class EvaluationNotFoundError(CoachError):
    def __init__(self, evaluation_id: int):
        super().__init__(f"Evaluation not found: {evaluation_id}")
        self.evaluation_id = evaluation_id


class EvaluationFinalizedError(CoachError):
    """이미 completed/failed 상태인 평가를 다시 수정하려고 할 때."""

    def __init__(self, evaluation_id: int, status: str):
        super().__init__(f"Evaluation {evaluation_id} is already {status}")
        self.evaluation_id = evaluation_id
        self.status = status


class InvalidVideoTypeError(CoachError):
    def __init__(self, content_type):
        super().__init__(
            "Invalid file type. Only MP4, WebM, and MOV videos are allowed."
        )
        self.content_type = content_type


class VideoTooLargeError(CoachError):
    def __init__(self, limit_bytes: int):
        super().__init__(f"Video file exceeds the {limit_bytes // (1024 * 1024)}MB limit")
        self.limit_bytes = limit_bytes
