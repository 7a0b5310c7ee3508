from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import INVENTORY_DATABASE_URL, settings

Base = declarative_base()


def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url, connect_args={"check_same_thread": False}
        )

        # pysqlite defers BEGIN on its own, which breaks SAVEPOINT handling
        @event.listens_for(engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=settings.DB_POOL_SIZE,        # max idle connections
        max_overflow=settings.DB_MAX_OVERFLOW,  # max temporary extra connections
        pool_timeout=30                         # wait time before failing
    )


inventory_engine = build_engine(INVENTORY_DATABASE_URL)
InventorySessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=inventory_engine)

# Dependency


def get_inventory_db():
    db = InventorySessionLocal()
    try:
        yield db
    finally:
        db.close()
