from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from core.config import settings


def build_engine(database_url: str):
    """DATABASE_URL로 엔진을 만든다.

    SQLite는 요청마다 다른 스레드에서 접근하므로 check_same_thread를 끄고,
    in-memory("sqlite://")면 모든 커넥션이 같은 DB를 보도록 StaticPool을 쓴다.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
