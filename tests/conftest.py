import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from services.assessment_engine.definitions import MODULES
from services.assessment_engine.engine import AssessmentEngine
from services.assessment_engine.models import QuestionBank, SuggestionTable
from src.db.models import Base
from tests.factories import make_question


@pytest.fixture
def simple_bank() -> QuestionBank:
    """One question per module, in MODULES order; options score 5, 3 and 0 on that module."""
    return QuestionBank.model_validate({"questions": [make_question(m) for m in MODULES]})


@pytest.fixture
def suggestion_table() -> SuggestionTable:
    return SuggestionTable.model_validate({
        "totalScore": {
            "0-20": "total-0-20",
            "21-40": "total-21-40",
            "41-60": "total-41-60",
            "61-80": "total-61-80",
            "81-100": "total-81-100",
        },
        "modules": {
            module: {bucket: f"{module}-{bucket}" for bucket in ["0-1", "1-2", "2-3", "3-4", "4-5"]}
            for module in MODULES
        },
    })


@pytest.fixture
def simple_engine(simple_bank, suggestion_table) -> AssessmentEngine:
    return AssessmentEngine(question_bank=simple_bank, suggestion_table=suggestion_table)


# --- Database Fixtures ---

@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads so TestClient requests see the same data."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# --- API Test Client Fixture ---

@pytest.fixture
def api_client(session_factory, simple_engine):
    from main import app
    from src.db.session import get_db
    from src.routers.assessment import get_assessment_engine

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_assessment_engine] = lambda: simple_engine
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
