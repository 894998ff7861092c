"""프로젝트 전역 설정 파일.

- BaseSettings를 이용해 .env 파일 또는 환경변수에서 설정값을 읽어온다.
- 저장소 종류, 업로드 제한, 분석 지연 시간 등을 여기서 한 번에 관리한다.
"""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 프로젝트 이름 (FastAPI 문서 제목 등에 사용)
    PROJECT_NAME: str = "Presentation Coach Backend"

    # 저장소 종류: "memory" (기본, 프로세스 메모리) 또는 "sql" (SQLAlchemy)
    STORAGE_BACKEND: str = "memory"

    # STORAGE_BACKEND=sql 일 때만 사용된다. 기본값은 메모리 SQLite.
    DATABASE_URL: str = "sqlite://"

    # 업로드된 영상이 저장될 디렉토리
    UPLOAD_DIR: str = "uploads"

    # 업로드 최대 크기 (200MB)
    MAX_UPLOAD_BYTES: int = 200 * 1024 * 1024

    # 허용하는 영상 MIME 타입 (MP4, WebM, MOV)
    ALLOWED_VIDEO_TYPES: List[str] = ["video/mp4", "video/webm", "video/quicktime"]

    # 업로드 후 분석 결과를 기록하기까지의 지연 시간(초)
    ANALYSIS_DELAY_SECONDS: float = 5.0

    # 백그라운드 분석 작업을 돌리는 워커 스레드 수
    ANALYSIS_WORKERS: int = 4

    # 실제 영상 길이를 읽지 않으므로, 타임라인 생성에 쓰는 기본 길이(초)
    NOMINAL_VIDEO_DURATION: float = 60.0

    # 업로드 요청에 user_id가 없을 때 사용할 사용자
    DEFAULT_USER_ID: int = 1

    CORS_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    # python -m presentation_coach 실행 시 사용
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    class Config:
        # .env 파일에서 환경변수를 읽어오겠다는 의미
        env_file = ".env"
        # .env에 추가 필드가 있어도 허용
        extra = "ignore"


# settings 객체를 import 해서 어디서든 설정값을 사용할 수 있다.
settings = Settings()
