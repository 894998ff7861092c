"""발표 코칭 백엔드 패키지.

- uvicorn presentation_coach.main:app 으로 실행하거나
- python -m presentation_coach 로 실행할 수 있다.
"""

__version__ = "0.1.0"
