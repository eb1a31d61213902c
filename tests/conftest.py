"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(scope="session", autouse=True)
def ensure_models_imported():
    """Ensure all models are imported so SQLAlchemy metadata is complete."""
    import app.db.models
    import app.executions.models

    from app.db.models import Base

    assert "training_executions" in Base.metadata.tables, "TrainingExecution model not registered in Base.metadata"
    assert "training_sessions" in Base.metadata.tables, "TrainingSession model not registered in Base.metadata"

    yield


@pytest.fixture(scope="function")
def db_session(monkeypatch):
    """
    Provides a transactional in-memory SQLite DB session for tests.

    This fixture:
    - Creates an isolated in-memory SQLite database per test
    - Patches the engine getter to use it
    - Patches get_session() (where it is defined and where it is imported)
      to yield the test session
    - Rolls the outer transaction back after the test

    Usage:
        def test_something(db_session):
            db_session.add(User(username="alice"))
            db_session.flush()
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    def mock_get_engine():
        return engine

    monkeypatch.setattr("app.db.session._get_engine", mock_get_engine)
    monkeypatch.setattr("app.db.session.get_engine", mock_get_engine)

    from app.db.models import Base

    Base.metadata.create_all(engine)

    connection = engine.connect()
    transaction = connection.begin()

    test_session_local = sessionmaker(bind=connection, autocommit=False, autoflush=False)
    session = test_session_local()

    @contextmanager
    def mock_get_session():
        yield session

    import app.api.dependencies.auth as auth_module
    import app.db.session as session_module
    import app.executions.routes as execution_routes
    import app.sessions.routes as session_routes

    monkeypatch.setattr(session_module, "get_session", mock_get_session)
    monkeypatch.setattr(auth_module, "get_session", mock_get_session)
    monkeypatch.setattr(execution_routes, "get_session", mock_get_session)
    monkeypatch.setattr(session_routes, "get_session", mock_get_session)

    try:
        yield session
    finally:
        session.rollback()
        if transaction.is_active:
            transaction.rollback()
        session.close()
        connection.close()
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    """Factory creating persisted users."""
    from app.db.models import User

    def _make_user(username: str = "alice", *, is_active: bool = True) -> User:
        user = User(username=username, email=f"{username}@example.com", is_active=is_active)
        db_session.add(user)
        db_session.flush()
        return user

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def make_exercise(db_session):
    """Factory creating catalog exercises."""
    from app.db.models import Exercise

    def _make_exercise(name: str, category: str = "Free weights"):
        exercise = Exercise(name=name, category=category)
        db_session.add(exercise)
        db_session.flush()
        return exercise

    return _make_exercise


@pytest.fixture
def make_template(db_session, make_exercise):
    """Factory creating a plan with one session template.

    exercises: list of (exercise, planned_sets, planned_reps, planned_weight_kg)
    """
    from app.db.models import PlannedExercise, TrainingPlan, TrainingSession

    def _make_template(
        exercises=None,
        *,
        session_name: str = "Push Day",
        plan_name: str = "Strength Block",
    ) -> TrainingSession:
        plan = db_session.query(TrainingPlan).filter_by(name=plan_name).one_or_none()
        if plan is None:
            plan = TrainingPlan(name=plan_name)
            db_session.add(plan)
            db_session.flush()

        template = TrainingSession(plan=plan, name=session_name, order_in_plan=len(plan.sessions) + 1)
        for index, (exercise, sets, reps, weight) in enumerate(exercises or [], start=1):
            template.planned_exercises.append(
                PlannedExercise(
                    exercise=exercise,
                    order_index=index,
                    planned_sets=sets,
                    planned_reps=reps,
                    planned_weight_kg=weight,
                )
            )
        db_session.add(template)
        db_session.flush()
        return template

    return _make_template


@pytest.fixture
def bench(make_exercise):
    return make_exercise("Bench Press", "Free weights")


@pytest.fixture
def dips(make_exercise):
    return make_exercise("Dips", "Bodyweight")


@pytest.fixture
def push_day(make_template, bench, dips):
    """Session template with two planned exercises."""
    return make_template([(bench, 3, 10, 60.0), (dips, 3, 12, 0.0)])
