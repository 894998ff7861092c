"""DB 연결 및 세션, Base 클래스 정의 파일.

STORAGE_BACKEND=sql 일 때만 사용된다. 기본 URL은 메모리 SQLite이며,
DATABASE_URL 환경변수로 다른 DB를 지정할 수 있다.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# SQLAlchemy Base 클래스
Base = declarative_base()


def create_session_factory(database_url: str):
    """엔진을 만들고 테이블을 생성한 뒤 세션 팩토리를 돌려준다."""
    if database_url.startswith("sqlite"):
        # 메모리 SQLite는 연결마다 DB가 따로 생기므로 연결 하나를 공유한다.
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            database_url,
            echo=False,
            pool_pre_ping=True,  # 연결 끊김 방지
        )

    # 모델을 import 해야 Base.metadata에 테이블이 등록된다.
    from presentation_coach.models import evaluation, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    safe_url = database_url.split("@")[1] if "@" in database_url else database_url
    logger.info("🔌 DB 연결: %s", safe_url)

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
