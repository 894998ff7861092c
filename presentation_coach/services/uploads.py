"""업로드된 영상 파일 저장.

- MIME 타입 검사 → 생성한 파일명으로 UPLOAD_DIR에 조금씩 나눠 저장
- 최대 크기를 넘으면 쓰던 파일을 지우고 VideoTooLargeError
"""

import logging
import uuid
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from presentation_coach.core.exceptions import InvalidVideoTypeError, VideoTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB

EXTENSIONS = {
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
}


def check_video_type(content_type: Optional[str], allowed_types: Iterable[str]) -> None:
    if content_type not in set(allowed_types):
        raise InvalidVideoTypeError(content_type)


def resolve_upload(upload_dir: str, filename: str) -> Optional[Path]:
    """/uploads/{filename} 요청을 실제 파일 경로로 바꾼다. 디렉토리 밖은 허용하지 않는다."""
    if not filename or Path(filename).name != filename:
        return None
    path = Path(upload_dir) / filename
    return path if path.is_file() else None


async def save_video_upload(
    upload: UploadFile,
    upload_dir: str,
    allowed_types: Iterable[str],
    max_bytes: int,
) -> str:
    """영상을 저장하고 평가 레코드에 넣을 URL 경로(/uploads/<파일명>)를 반환한다."""
    check_video_type(upload.content_type, allowed_types)

    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    filename = uuid.uuid4().hex + EXTENSIONS.get(upload.content_type, "")
    file_path = directory / filename

    written = 0
    try:
        with open(file_path, "wb") as f:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise VideoTooLargeError(max_bytes)
                f.write(chunk)
    except Exception:
        file_path.unlink(missing_ok=True)
        raise

    logger.info("📁 영상 저장: %s (%d bytes)", file_path, written)
    return f"/uploads/{filename}"
