"""업로드된 영상 파일을 그대로 내려주는 라우터."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from presentation_coach.core.config import Settings
from presentation_coach.dependencies import get_settings
from presentation_coach.services.uploads import resolve_upload

router = APIRouter(prefix="/uploads", tags=["media"])


@router.get("/{filename}")
def get_uploaded_video(filename: str, settings: Settings = Depends(get_settings)):
    """저장된 영상 파일 반환. 파일이 없으면 404."""
    path = resolve_upload(settings.UPLOAD_DIR, filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Video file not found")
    return FileResponse(path=str(path))
