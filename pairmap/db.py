from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from pairmap.config import settings


class Base(DeclarativeBase):
    pass


_engine = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def get_engine():
    global _engine
    if _engine is None:
        if _is_sqlite(settings.database_url):
            _engine = create_engine(
                settings.database_url,
                connect_args={"check_same_thread": False},
            )

            @event.listens_for(_engine, "connect")
            def _enable_foreign_keys(dbapi_connection, _connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        else:
            _engine = create_engine(
                settings.database_url,
                pool_pre_ping=True,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_recycle=settings.db_pool_recycle,
            )
    return _engine


SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)


def get_db():
    """Centralized database session dependency for FastAPI.

    Yields a database session and ensures it is closed after the request.

    Example:
        @app.get("/cables")
        def list_cables(db: Session = Depends(get_db)):
            return db.query(Cable).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
