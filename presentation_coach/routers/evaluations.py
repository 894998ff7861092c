"""발표 평가 라우터.

- POST /api/evaluations/upload : 영상 업로드 → processing 평가 생성
- GET  /api/evaluations/{id} : 평가 한 건 조회 (클라이언트가 3초마다 폴링)
- GET  /api/evaluations/user/{user_id} : 사용자의 평가 목록 (최신순)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from presentation_coach.core.config import Settings
from presentation_coach.core.exceptions import InvalidVideoTypeError, VideoTooLargeError
from presentation_coach.dependencies import get_lifecycle, get_settings, get_storage
from presentation_coach.schemas.evaluation import Evaluation
from presentation_coach.services.lifecycle import EvaluationLifecycle
from presentation_coach.services.storage import Storage
from presentation_coach.services.uploads import save_video_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/evaluations", tags=["evaluations"])


@router.post("/upload", response_model=Evaluation, status_code=status.HTTP_201_CREATED)
async def upload_evaluation(
    video: Optional[UploadFile] = File(default=None),
    title: Optional[str] = Form(default=None),
    user_id: Optional[int] = Form(default=None),
    settings: Settings = Depends(get_settings),
    lifecycle: EvaluationLifecycle = Depends(get_lifecycle),
):
    """발표 영상을 업로드하고 분석을 예약하는 엔드포인트.

    요청:
        - multipart/form-data 형식
        - video: 영상 파일 (mp4, webm, mov / 최대 200MB)
        - title: (선택) 평가 제목. 비어 있으면 현재 시각으로 채운다.
        - user_id: (선택) 없으면 DEFAULT_USER_ID

    동작:
        1) 파일 형식/크기 검사 후 uploads 디렉토리에 저장
        2) processing 상태의 평가 레코드 생성
        3) 지연 후 분석 결과를 기록하는 작업 예약
        4) 생성된 레코드를 바로 반환 (분석 완료를 기다리지 않는다)
    """
    if video is None or not video.filename:
        raise HTTPException(status_code=400, detail="No video file uploaded")

    try:
        video_url = await save_video_upload(
            video,
            upload_dir=settings.UPLOAD_DIR,
            allowed_types=settings.ALLOWED_VIDEO_TYPES,
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
        owner = user_id if user_id is not None else settings.DEFAULT_USER_ID
        return lifecycle.submit_evaluation(owner, title, video_url)
    except InvalidVideoTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except VideoTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except Exception:
        logger.exception("❌ 영상 업로드 중 오류")
        raise HTTPException(status_code=500, detail="Error uploading video")


@router.get("/user/{user_id}", response_model=List[Evaluation])
def list_user_evaluations(user_id: int, storage: Storage = Depends(get_storage)):
    """사용자의 평가 목록을 최신순으로 반환."""
    return storage.get_evaluations_by_user_id(user_id)


@router.get("/{evaluation_id}", response_model=Evaluation)
def get_evaluation(evaluation_id: int, storage: Storage = Depends(get_storage)):
    evaluation = storage.get_evaluation(evaluation_id)
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return evaluation
