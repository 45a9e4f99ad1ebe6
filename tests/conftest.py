import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pairmap import models  # noqa: F401
from pairmap.db import Base
from pairmap.models.cabling import CableRole
from pairmap.schemas.cabling import CableCreate
from pairmap.services import cables as cables_service


@pytest.fixture()
def engine():
    # Services commit and roll back for real, so each test gets its own database.
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_cable(db_session):
    def _make(name: str, role: CableRole, pair_count: int = 100, circuit_ids: list[str] | None = None):
        payload = CableCreate(name=name, pair_count=pair_count, role=role, circuit_ids=circuit_ids or [])
        return cables_service.cables.create(db_session, payload)

    return _make


@pytest.fixture()
def feed_cable(make_cable):
    return make_cable("F1", CableRole.Feed)


@pytest.fixture()
def distribution_cable(make_cable):
    return make_cable("D1", CableRole.Distribution)


def assert_contiguous(circuits) -> None:
    """Circuits in position order partition [1, total] with correct spans."""
    from pairmap.logic.circuit_id import pair_count

    expected_start = 1
    for position, circuit in enumerate(sorted(circuits, key=lambda c: c.position)):
        assert circuit.position == position
        assert circuit.pair_start == expected_start
        assert circuit.pair_end - circuit.pair_start + 1 == pair_count(circuit.circuit_id)
        expected_start = circuit.pair_end + 1


@pytest.fixture()
def check_contiguous():
    return assert_contiguous
