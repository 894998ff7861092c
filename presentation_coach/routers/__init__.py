"""라우터 패키지 초기화 파일.

- main.py에서 from presentation_coach.routers import users, evaluations, media 로 사용한다.
"""

from . import evaluations, media, users  # noqa: F401
