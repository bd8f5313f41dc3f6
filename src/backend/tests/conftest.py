"""Test fixtures."""

from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from kickoff.agents.engine import ConversationEngine
from kickoff.api.assistant import (
    get_current_user,
    get_description_generator,
    get_engine,
    get_project_storage,
)
from kickoff.main import app
from kickoff.models.conversation import ConversationContext, WizardStep
from kickoff.models.project import ProjectRecord
from kickoff.services.auth_service import AuthenticatedUser
from kickoff.services.description_generator import GenerationError
from kickoff.services.project_storage import ProjectCreationError

TEST_TOKEN = "test-token"


def future_deadline(days: int = 90) -> str:
    """A DD.MM.YYYY deadline the given number of days from today."""
    return (date.today() + timedelta(days=days)).strftime("%d.%m.%Y")


def context_at(step: WizardStep, **fields) -> ConversationContext:
    """Build a context positioned at a step with the given record fields."""
    return ConversationContext(current_step=step, project_data=ProjectRecord(**fields))


def complete_record(**overrides) -> dict:
    """Field values of a record that passes full validation."""
    fields = {
        "name": "Website Redesign",
        "description": "Rebuild the company website. Goal: double sign-ups.",
        "deadline": future_deadline(),
        "priority": "HIGH",
    }
    fields.update(overrides)
    return fields


class FakeDescriptionGenerator:
    """Stands in for the generative backend."""

    def __init__(self, text: str = "A generated project description with clear goals."):
        self.text = text
        self.fail = False
        self.calls: list[tuple[str, str]] = []

    def suggest(self, raw_info: str) -> str:
        self.calls.append(("suggest", raw_info))
        if self.fail:
            raise GenerationError("backend unavailable")
        return self.text

    def draft(self, project_info: str) -> str:
        self.calls.append(("draft", project_info))
        if self.fail:
            raise GenerationError("backend unavailable")
        return self.text


class FakeProjectStorage:
    """Records created projects instead of calling the project service."""

    def __init__(self):
        self.fail = False
        self.created: list[tuple[ProjectRecord, str]] = []

    def create_project(self, record: ProjectRecord, credential: str) -> dict:
        if self.fail:
            raise ProjectCreationError("Failed to create project: service down")
        self.created.append((record, credential))
        return {"id": "proj_1"}


@pytest.fixture
def generator():
    return FakeDescriptionGenerator()


@pytest.fixture
def engine(generator):
    return ConversationEngine(description_generator=generator)


@pytest.fixture
def storage():
    return FakeProjectStorage()


@pytest.fixture
async def client(engine, generator, storage):
    """Create test client with collaborator overrides."""
    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(
        id="user-1", token=TEST_TOKEN
    )
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_description_generator] = lambda: generator
    app.dependency_overrides[get_project_storage] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
