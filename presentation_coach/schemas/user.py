"""User 관련 Pydantic 스키마 정의 파일.

- 스키마(Schema)는 '요청/응답'에서 사용하는 데이터 형태를 정의한다.
- 저장소(Storage)도 이 스키마를 레코드 형태로 그대로 사용한다.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """회원가입 요청 시 사용되는 데이터 형태."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class User(BaseModel):
    """저장소에 보관되는 사용자 레코드. password에는 해시값이 들어간다."""

    id: int
    username: str
    password: str

    class Config:
        # SQLAlchemy 객체를 이 스키마로 변환할 수 있게 해주는 옵션
        from_attributes = True


class UserOut(BaseModel):
    """클라이언트에게 응답으로 돌려줄 때 사용할 User 형태.

    - 비밀번호 해시 같은 민감 정보는 포함하지 않는다.
    """

    id: int
    username: str
