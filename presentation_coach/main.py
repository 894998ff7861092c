"""FastAPI 애플리케이션 엔트리 포인트.

- uvicorn presentation_coach.main:app --reload 명령으로 실행된다.
- 여기서 로깅, 라우터 등록, CORS 설정, 저장소/분석 워커 생성을 한 번에 수행한다.
"""

import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from presentation_coach.core.config import Settings, settings as default_settings
from presentation_coach.routers import evaluations, media, users
from presentation_coach.services.analyzer import Analyzer, SimulatedAnalyzer
from presentation_coach.services.lifecycle import EvaluationLifecycle
from presentation_coach.services.storage import Storage, build_storage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def format_validation_error(exc: RequestValidationError) -> str:
    """pydantic 에러 목록을 사람이 읽을 수 있는 한 줄 메시지로 만든다."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{error.get('msg')} at \"{location}\"" if location else error.get("msg"))
    return "Validation error: " + "; ".join(parts)


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    analyzer: Optional[Analyzer] = None,
) -> FastAPI:
    settings = settings or default_settings
    storage = storage or build_storage(settings)
    analyzer = analyzer or SimulatedAnalyzer(
        rng=random.Random(), duration_seconds=settings.NOMINAL_VIDEO_DURATION
    )
    lifecycle = EvaluationLifecycle(
        storage,
        analyzer,
        delay_seconds=settings.ANALYSIS_DELAY_SECONDS,
        max_workers=settings.ANALYSIS_WORKERS,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 %s 시작 (storage=%s)", settings.PROJECT_NAME, settings.STORAGE_BACKEND)
        yield
        # 아직 대기 중인 분석 작업은 취소되고 레코드는 processing 으로 남는다.
        lifecycle.shutdown(wait=False)
        logger.info("🛑 %s 종료", settings.PROJECT_NAME)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage
    app.state.lifecycle = lifecycle

    # CORS 설정
    # - 프론트엔드에서 이 백엔드 API를 호출할 수 있도록 허용하는 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # 스키마 위반은 422 대신 400 으로 돌려준다.
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": format_validation_error(exc)},
        )

    # 라우터 등록
    app.include_router(users.router)
    app.include_router(evaluations.router)
    app.include_router(media.router)

    @app.get("/")
    def root():
        """헬스 체크용 기본 엔드포인트."""
        return {"message": "Presentation coach backend is running"}

    return app


configure_logging(default_settings.LOG_LEVEL)

app = create_app()
