# storefront/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from storefront.utils.settings import DATABASE_URL, SQL_ECHO


class Base(DeclarativeBase):
    pass


def _use_immediate_transactions(engine: Engine) -> None:
    # sqlite: kazda transakcja od razu bierze blokade zapisu (BEGIN IMMEDIATE),
    # rownolegle transakcje czekaja w kolejce zamiast dostac "database is locked"
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _use_immediate_transactions(engine)
        return engine

    return create_engine(url, echo=echo, pool_pre_ping=True)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


engine = make_engine(DATABASE_URL, echo=SQL_ECHO)
SessionLocal = make_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    # import modeli zeby zarejestrowaly sie w Base.metadata
    import storefront.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
