# intervium/db/session.py
# SQLAlchemy 기본 세팅. DB URL은 .env의 DATABASE_URL을 사용.

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from intervium.config import settings  # Settings() 인스턴스

# 운영: postgresql+psycopg2://...  로컬/테스트: sqlite:// 또는 sqlite:///./intervium.db
DATABASE_URL = settings.database_url

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL 환경변수가 설정되어 있지 않습니다.")


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # 메모리 DB는 커넥션 하나를 모든 스레드가 공유해야 테이블이 유지됨
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,  # 끊어진 커넥션 자동 감지
        "pool_size": 30,
        "max_overflow": 0,      # 풀 크기 초과 연결 금지
        "pool_timeout": 30,     # 풀 고갈 시 대기 시간(초) 후 Timeout
    }


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    """Create missing tables. Schema migrations are managed outside the app."""
    # 모델 등록을 위해 import (Base.metadata에 테이블 추가)
    from intervium.models import interview  # noqa: F401

    Base.metadata.create_all(bind=engine)
