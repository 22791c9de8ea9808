"""
Pytest configuration and fixtures for the AuditShield backend tests.

The record store runs against an in-memory SQLite database that lives for a
single test; foreign keys are enabled so cascades behave as in production.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.dependencies import get_store
from database import enable_sqlite_foreign_keys, init_db, make_session_factory
from models import Answer, Question
from services.record_store import RecordStore
from services.workflow import AuditWorkflow

TEMPLATE = [
    ("¿Existe una política de control de acceso?", "A.9.1"),
    ("¿Se revisan los derechos de acceso?", "A.9.3"),
    ("¿Se monitorean los registros de actividad?", "A.12"),
]


def make_answers(*values, audit_id=1):
    """Build transient answers, one per value, with sequential ids."""
    return [
        Answer(id=i, audit_id=audit_id, question_id=i, value=v)
        for i, v in enumerate(values, 1)
    ]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine) -> RecordStore:
    return RecordStore(make_session_factory(engine))


@pytest.fixture
def workflow(store) -> AuditWorkflow:
    return AuditWorkflow(store, iso_control="ISO/IEC 27001:2022")


@pytest_asyncio.fixture
async def questions(store) -> list[Question]:
    """Seed a small three-question template and return it ordered by id."""
    await store.insert_questions([Question(text=t, control_ref=ref) for t, ref in TEMPLATE])
    return await store.get_all_questions().once()


@pytest_asyncio.fixture
async def client(store):
    """HTTP client bound to the app with the test store injected."""
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()
