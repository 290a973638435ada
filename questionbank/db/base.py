from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from questionbank.config.settings import get_settings

_engine = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(database_url, echo=False, connect_args=connect_args)
        configure_sqlite(_engine)
    return _engine


def configure_sqlite(engine: Engine) -> None:
    """Turn on foreign keys and let SQLAlchemy own BEGIN on pysqlite.

    Without taking over BEGIN, the driver starts transactions lazily and a
    SAVEPOINT issued before any write becomes the outermost transaction.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN")


def init_db() -> None:
    """Create all tables that do not exist yet."""
    from questionbank.db import schemas  # noqa: F401  registers table metadata

    engine = get_engine()
    SQLModel.metadata.create_all(engine)
