# Set environment variables before the application reads its settings
import os

os.environ["TESTING"] = "True"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_FILE", "logs/test.log")

import uuid
from typing import Callable, Dict, List

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from codeitout.business.services import generate_password_hash, issue_session
from codeitout.config import logger
from codeitout.data.repositories import (
    get_judge_client,
    get_problem_repository,
    get_user_repository,
)
from codeitout.data.schemas import (
    JudgeResult,
    JudgeStatus,
    Problem,
    ProblemCreate,
    SubmissionUnit,
    User,
    UserRole,
    utc_now,
)
from codeitout.errors import DuplicateEmailException, ResourceNotFoundException
from codeitout.main import app


class InMemoryUserRepository:
    def __init__(self):
        self.users: Dict[uuid.UUID, User] = {}

    def add(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def find_user_by_email(self, email: str):
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_user_by_id(self, user_id):
        return next((u for u in self.users.values() if str(u.id) == str(user_id)), None)

    async def create_user(self, email, password_hash, name=None, role=UserRole.USER):
        if await self.find_user_by_email(email):
            raise DuplicateEmailException()
        return self.add(
            User(email=email, password_hash=password_hash, name=name, role=role)
        )


class InMemoryProblemRepository:
    def __init__(self):
        self.problems: Dict[uuid.UUID, Problem] = {}

    async def create_problem(self, draft: ProblemCreate, user_id) -> Problem:
        problem = Problem(**draft.to_record(), user_id=user_id)
        self.problems[problem.id] = problem
        return problem

    async def get_problem(self, problem_id) -> Problem:
        if problem_id not in self.problems:
            raise ResourceNotFoundException(detail=f"Problem {problem_id} not found")
        return self.problems[problem_id]

    async def list_problems(self, skip=0, limit=100) -> List[Problem]:
        return list(self.problems.values())[skip:skip + limit]

    async def update_problem(self, problem_id, draft: ProblemCreate) -> Problem:
        problem = await self.get_problem(problem_id)
        for field, value in draft.to_record().items():
            setattr(problem, field, value)
        problem.updated_at = utc_now()
        return problem

    async def delete_problem(self, problem_id) -> None:
        await self.get_problem(problem_id)
        del self.problems[problem_id]


class FakeJudgeClient:
    """Deterministic judge: ``verdict(unit)`` decides each unit's status id."""

    def __init__(self):
        self.verdict: Callable[[SubmissionUnit], int] = lambda unit: 3
        self.submitted: List[List[SubmissionUnit]] = []
        self.polled: List[List[str]] = []
        self._units: Dict[str, SubmissionUnit] = {}

    @property
    def submitted_language_ids(self) -> List[int]:
        return [batch[0].language_id for batch in self.submitted if batch]

    async def submit_batch(self, units):
        self.submitted.append(list(units))
        tokens = []
        for unit in units:
            token = f"token-{len(self._units)}"
            self._units[token] = unit
            tokens.append(token)
        return tokens

    async def poll_batch_results(self, tokens):
        self.polled.append(list(tokens))
        results = []
        for token in tokens:
            unit = self._units[token]
            status_id = self.verdict(unit)
            results.append(
                JudgeResult(
                    token=token,
                    status=JudgeStatus(
                        id=status_id,
                        description="Accepted" if status_id == 3 else "Wrong Answer",
                    ),
                    stdout=unit.stdin if status_id == 3 else f"not {unit.stdin}",
                )
            )
        return results


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def problem_repository():
    return InMemoryProblemRepository()


@pytest.fixture
def judge():
    return FakeJudgeClient()


@pytest.fixture
def admin_user(user_repository):
    return user_repository.add(
        User(
            email="admin@example.com",
            password_hash=generate_password_hash("adminpass"),
            name="Admin",
            role=UserRole.ADMIN,
        )
    )


@pytest.fixture
def regular_user(user_repository):
    return user_repository.add(
        User(
            email="user@example.com",
            password_hash=generate_password_hash("password123"),
            name="Regular",
            role=UserRole.USER,
        )
    )


@pytest.fixture
def client(user_repository, problem_repository, judge):
    app.dependency_overrides[get_user_repository] = lambda: user_repository
    app.dependency_overrides[get_problem_repository] = lambda: problem_repository
    app.dependency_overrides[get_judge_client] = lambda: judge

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, admin_user):
    client.cookies.set("jwt", issue_session(admin_user.id))
    return client


@pytest.fixture
def user_client(client, regular_user):
    client.cookies.set("jwt", issue_session(regular_user.id))
    return client


@pytest.fixture
def problem_payload():
    return {
        "title": "Echo",
        "description": "Print the input back.",
        "difficulty": "EASY",
        "tags": ["io", "basics"],
        "examples": [{"input": "5", "output": "5", "explanation": "Echoed"}],
        "constraints": "1 <= n <= 10",
        "testCases": [{"input": "5", "output": "5"}],
        "codeSnippets": {"python": "# read a line and print it\n"},
        "referenceSolutions": {"python": "print(input())"},
    }


# Real tables on an in-memory SQLite database for repository tests
@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session

    await engine.dispose()


# Disable logging during tests
@pytest.fixture(autouse=True)
def disable_logging():
    logger.disabled = True
    yield
    logger.disabled = False
