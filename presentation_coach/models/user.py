"""사용자(User) 관련 DB 모델 정의 파일.

- SqlStorage에서만 사용한다. 메모리 저장소는 schemas.user.User를 그대로 보관한다.
"""

from sqlalchemy import Column, Integer, String

from presentation_coach.database import Base


class UserRow(Base):
    """users 테이블에 해당하는 ORM 모델."""

    __tablename__ = "users"

    # 기본 키 (PK)
    id = Column(Integer, primary_key=True, index=True)

    # username: unique + index 로 설정해서 빠르게 검색 가능하도록 함
    username = Column(String(255), unique=True, index=True, nullable=False)

    # 비밀번호는 그대로 저장하지 않고, 해시값만 저장한다.
    password = Column(String(255), nullable=False)
