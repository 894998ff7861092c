"""FastAPI dependency 함수 모음.

저장소와 생애주기 드라이버는 main.create_app()에서 app.state에 올려두고,
라우터는 Depends()로 꺼내 쓴다. 테스트에서는 앱을 새로 만들어서 교체한다.
"""

from fastapi import Request

from presentation_coach.core.config import Settings
from presentation_coach.services.lifecycle import EvaluationLifecycle
from presentation_coach.services.storage import Storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_lifecycle(request: Request) -> EvaluationLifecycle:
    return request.app.state.lifecycle
