# client.py
"""백엔드 API 호출 함수 모음 (프론트엔드/스크립트용).

업로드 후에는 wait_for_evaluation()으로 processing 이 끝날 때까지 폴링한다.
"""

import time

import requests

# 업로드는 영상 크기 때문에 오래 걸릴 수 있다
TIMEOUT = 300  # 5분
POLL_INTERVAL = 3.0  # 초

TERMINAL_STATUSES = ("completed", "failed")


def _url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + path


def create_user(base_url: str, username: str, password: str) -> dict:
    payload = {"username": username, "password": password}
    resp = requests.post(_url(base_url, "/api/users"), json=payload, timeout=TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def upload_video(
    base_url: str,
    file_bytes: bytes,
    filename: str,
    mime_type: str,
    title: str | None = None,
    user_id: int | None = None,
) -> dict:
    files = {"video": (filename, file_bytes, mime_type)}
    data = {}
    if title:
        data["title"] = title
    if user_id is not None:
        data["user_id"] = str(user_id)

    resp = requests.post(
        _url(base_url, "/api/evaluations/upload"), files=files, data=data, timeout=TIMEOUT
    )
    resp.raise_for_status()
    return resp.json()


def get_evaluation(base_url: str, evaluation_id: int) -> dict:
    resp = requests.get(_url(base_url, f"/api/evaluations/{evaluation_id}"), timeout=TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def get_user_evaluations(base_url: str, user_id: int) -> list:
    resp = requests.get(_url(base_url, f"/api/evaluations/user/{user_id}"), timeout=TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def wait_for_evaluation(
    base_url: str,
    evaluation_id: int,
    interval: float = POLL_INTERVAL,
    timeout: float | None = None,
    sleep=time.sleep,
) -> dict:
    """status가 processing 이 아닐 때까지 interval 초마다 다시 조회한다.

    반환값:
        completed 또는 failed 상태의 평가 레코드(dict)

    timeout(초)이 지나도 끝나지 않으면 TimeoutError.
    failed 인 경우에도 예외 없이 레코드를 그대로 돌려준다.
    """
    deadline = None if timeout is None else time.monotonic() + timeout

    while True:
        evaluation = get_evaluation(base_url, evaluation_id)
        if evaluation.get("status") in TERMINAL_STATUSES:
            return evaluation
        if deadline is not None and time.monotonic() + interval > deadline:
            raise TimeoutError(
                f"Evaluation {evaluation_id} still processing after {timeout} seconds"
            )
        sleep(interval)


def get_root(base_url: str):
    return requests.get(_url(base_url, "/"), timeout=TIMEOUT)
