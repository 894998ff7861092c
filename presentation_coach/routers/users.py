"""사용자 등록 라우터.

- 회원가입(POST /api/users)

⚠ 로그인/토큰 발급은 없다. username 중복만 검사하고 사용자를 만든다.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from passlib.context import CryptContext

from presentation_coach.core.exceptions import UsernameTakenError
from presentation_coach.dependencies import get_storage
from presentation_coach.schemas.user import UserCreate, UserOut
from presentation_coach.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

# 비밀번호 해싱 설정 (pbkdf2_sha256)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """평문 비밀번호를 안전하게 해시값으로 변환."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """입력한 비밀번호와 저장된 해시값이 일치하는지 확인."""
    return pwd_context.verify(plain, hashed)


def register_user(storage: Storage, payload: UserCreate) -> UserOut:
    if storage.get_user_by_username(payload.username):
        raise UsernameTakenError(payload.username)

    user = storage.create_user(
        UserCreate(username=payload.username, password=get_password_hash(payload.password))
    )
    logger.info("👤 사용자 등록: user_%s (%s)", user.id, user.username)
    return UserOut(id=user.id, username=user.username)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, storage: Storage = Depends(get_storage)):
    """회원가입 엔드포인트.

    - 이미 동일한 username이 존재하면 409 에러 반환
    - 아니면 새 사용자를 만들고 {id, username}만 반환 (비밀번호 해시는 숨김)
    """
    try:
        return register_user(storage, payload)
    except UsernameTakenError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
