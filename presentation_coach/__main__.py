"""백엔드 실행 스크립트.

python -m presentation_coach 또는 presentation-coach 명령으로 uvicorn 서버를 띄운다.
"""

import argparse

import uvicorn

from presentation_coach.core.config import settings


def main():
    parser = argparse.ArgumentParser(description="Presentation coach backend")
    parser.add_argument("--host", default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument("--reload", action="store_true", help="코드 변경 시 자동 재시작 (개발용)")
    args = parser.parse_args()

    print("=" * 60)
    print(f"{settings.PROJECT_NAME}  http://{args.host}:{args.port}")
    print(f"storage={settings.STORAGE_BACKEND}  uploads={settings.UPLOAD_DIR}")
    print("=" * 60)

    uvicorn.run(
        "presentation_coach.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
