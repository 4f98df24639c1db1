"""
Pytest configuration and shared fixtures for tests.

WHAT: Centralized test configuration with markers
WHY: Enable test organization, filtering, and shared test utilities
HOW: Define pytest markers, fixtures, and test helpers
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from cartai.llm.provider_factory import reset_provider
from cartai.agents.profiles import DEFAULT_SELLER_PROFILES
from cartai.core.database import Base, db_session
from cartai.api.deps import get_llm_provider
from cartai.core import models  # noqa: F401  (registers ORM tables)
from cartai.models.negotiation import MultiSellerConfig, SingleSellerConfig
from tests.fixtures.mock_llm import MockLLMProvider


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (isolated component tests)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (multiple components)"
    )


@pytest.fixture(autouse=True)
def reset_provider_singleton():
    """
    Reset provider singleton before each test.

    WHAT: Clear provider cache between tests
    WHY: Prevent test pollution and ensure clean state
    HOW: Call reset_provider() before and after each test
    """
    reset_provider()
    yield
    reset_provider()


@pytest.fixture
def failing_provider():
    """Provider whose every call fails, forcing deterministic fallback text."""
    return MockLLMProvider(should_fail=True)


@pytest.fixture
def multi_config():
    return MultiSellerConfig(
        product="bamboo toothbrushes",
        quantity=10,
        budget=100,
        priority="price",
        buyer_name="Alex",
        sellers=DEFAULT_SELLER_PROFILES,
        total_rounds=6,
    )


@pytest.fixture
def single_config():
    return SingleSellerConfig(
        product="running shoes",
        quantity=2,
        budget=110,
        priority="price",
        buyer_name="Alex",
        sellers=DEFAULT_SELLER_PROFILES,
        seller_id="seller_fast_trader",
    )


@pytest.fixture
def db_session_factory():
    """
    In-memory SQLite session factory.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    yield factory
    engine.dispose()


@pytest.fixture
def db(db_session_factory):
    session = db_session_factory()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def mock_provider():
    return MockLLMProvider()


@pytest.fixture
def client(db_session_factory, mock_provider):
    """
    Create FastAPI test client with test doubles for DB and LLM.

    WHAT: TestClient wired to an in-memory database and a mock LLM provider
    WHY: Exercise routing, validation and error handlers without network or disk
    HOW: FastAPI dependency_overrides, cleared after each test
    """
    from cartai.main import app

    def override_db_session():
        session = db_session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[db_session] = override_db_session
    app.dependency_overrides[get_llm_provider] = lambda: mock_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
