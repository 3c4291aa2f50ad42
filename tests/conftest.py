import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
# Keep remote providers disabled by default for unit/API tests. Individual
# tests can opt-in by monkeypatching settings or overriding dependencies.
os.environ["GROQ_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["CLAUDE_MODEL"] = "claude-3-5-haiku-latest"
os.environ["CHAT_CLEAR_RESETS_FREE_MESSAGES"] = "false"

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from careercrafter.platform.database import Base, get_db
from careercrafter.main import app
from careercrafter.platform.middleware import _rate_limit_store
from careercrafter.components.matching.chain import MatchingProviderChain
from careercrafter.domains.ai_chat.routes import get_chat_responder
from careercrafter.domains.ai_matching.routes import get_matching_chain
from careercrafter.models.chat import ChatUsageState
from careercrafter.models.job import Job
from careercrafter.models.user import User

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeResponder:
    """Stands in for the remote chat model and records every call."""

    def __init__(self, reply_text: str = "Happy to help with your career questions!"):
        self.reply_text = reply_text
        self.error: Exception | None = None
        self.calls: list[dict] = []

    def reply(self, message, history, *, tier, remaining_free):
        self.calls.append(
            {"message": message, "history": list(history), "tier": tier, "remaining_free": remaining_free}
        )
        if self.error is not None:
            raise self.error
        return self.reply_text


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def responder():
    return FakeResponder()


@pytest.fixture
def matching_chain():
    # No remote providers: every match run uses the deterministic scorer.
    return MatchingProviderChain([])


@pytest.fixture(scope="function")
def client(db, responder, matching_chain):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_chat_responder] = lambda: responder
    app.dependency_overrides[get_matching_chain] = lambda: matching_chain
    Base.metadata.create_all(bind=engine)
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def create_user(db, email=None, **overrides) -> User:
    fields = {
        "email": (email or f"seeker-{_unique_id()}@test.com").lower(),
        "full_name": "Test Seeker",
        "role": "job_seeker",
        "skills": ["react", "javascript"],
        "desired_job_title": "Frontend Developer",
        "years_of_experience": "3 years",
        "education": "bachelor",
        "expected_salary": 5000,
        "preferred_location": "remote",
        "preferred_job_type": "full-time",
        "is_premium": False,
        "ai_credits": 0,
    }
    fields.update(overrides)
    user = User(**fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_job(db, **overrides) -> Job:
    fields = {
        "title": "React Developer",
        "company": "Acme",
        "description": "Build user interfaces",
        "required_skills": ["react", "javascript"],
        "preferred_skills": [],
        "experience_level": "mid",
        "education_level": "bachelor",
        "salary_min": 4000,
        "salary_max": 6000,
        "location": "Remote",
        "work_mode": "remote",
        "job_type": "full-time",
        "status": "active",
    }
    fields.update(overrides)
    job = Job(**fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def set_message_count(db, email: str, count: int) -> ChatUsageState:
    usage = db.query(ChatUsageState).filter(ChatUsageState.user_email == email).first()
    if usage is None:
        usage = ChatUsageState(user_email=email, user_messages_count=count)
        db.add(usage)
    else:
        usage.user_messages_count = count
    db.commit()
    return usage


def python_job_fields() -> dict:
    return {
        "title": "Python Developer",
        "description": "Build data pipelines",
        "required_skills": ["python", "django"],
    }
