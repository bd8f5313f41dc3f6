"""Integration tests for the project assistant API."""

import httpx
import pytest

from conftest import TEST_TOKEN, complete_record, future_deadline
from kickoff.api.assistant import get_auth_client, get_current_user
from kickoff.main import app
from kickoff.services.auth_service import AuthClient

CHAT_URL = "/api/v1/ai/project/chat"
GENERATE_URL = "/api/v1/ai/project/generate-description"


def context_payload(step: str, **fields) -> dict:
    return {"current_step": step, "project_data": fields}


async def say(client, message: str, context: dict | None = None):
    payload = {"message": message}
    if context is not None:
        payload["context"] = context
    return await client.post(CHAT_URL, json=payload)


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestChat:
    """Tests for the chat endpoint."""

    async def test_first_turn_returns_welcome(self, client):
        response = await say(client, "hello")
        assert response.status_code == 200

        data = response.json()
        assert "What should the project be called?" in data["message"]
        assert data["project_context"]["current_step"] == "name"
        assert data["project_context"]["project_data"]["status"] == "IN_PROGRESS"
        assert "suggested_action" not in data

    async def test_validation_error_keeps_step(self, client):
        response = await say(client, "AI", context_payload("name"))
        data = response.json()

        assert response.status_code == 200
        assert data["message"].startswith("❌")
        assert data["project_context"]["current_step"] == "name"
        assert data["project_context"]["validation_state"]["is_valid"] is False

    async def test_full_walk_creates_project(self, client, storage):
        deadline = future_deadline()
        context = (await say(client, "hello")).json()["project_context"]

        for message in [
            "Website Redesign",
            "Rebuild the company website to double sign-ups.",
            deadline,
            "high",
            "done",
        ]:
            response = await say(client, message, context)
            assert response.status_code == 200
            context = response.json()["project_context"]

        assert context["current_step"] == "confirmation"

        response = await say(client, "yes", context)
        data = response.json()

        assert response.status_code == 200
        assert data["suggested_action"] == "create_project"
        assert data["message"] == '✅ Project "Website Redesign" has been created!'
        assert data["project_context"]["current_step"] == "terminal"

        assert len(storage.created) == 1
        record, credential = storage.created[0]
        assert credential == TEST_TOKEN
        assert record.name == "Website Redesign"
        assert record.deadline == deadline
        assert record.priority == "HIGH"

    async def test_terminal_context_does_not_create_again(self, client, storage):
        response = await say(client, "yes", context_payload("terminal", **complete_record()))

        assert response.status_code == 200
        assert "already been created" in response.json()["message"]
        assert storage.created == []

    async def test_storage_failure_returns_error(self, client, storage):
        storage.fail = True
        response = await say(client, "yes", context_payload("confirmation", **complete_record()))
        data = response.json()

        assert response.status_code == 502
        assert data["error"].startswith("Failed to create project")
        assert data["suggested_action"] == "create_project"
        assert data["project_context"]["current_step"] == "confirmation"

    async def test_invalid_record_at_confirmation(self, client, storage):
        response = await say(
            client, "yes", context_payload("confirmation", **complete_record(name="AI"))
        )
        data = response.json()

        assert response.status_code == 200
        assert "- name:" in data["message"]
        assert "suggested_action" not in data
        assert storage.created == []

    async def test_unknown_step_is_rejected(self, client):
        response = await say(client, "hello", context_payload("archived"))
        assert response.status_code == 422

    async def test_generation_side_path(self, client, generator):
        response = await say(
            client, "generate description: a CRM for dentists", context_payload("description")
        )
        data = response.json()

        assert response.status_code == 200
        assert data["project_context"]["pending_description"] == generator.text

        response = await say(client, "yes", data["project_context"])
        data = response.json()
        assert data["project_context"]["project_data"]["description"] == generator.text
        assert data["project_context"]["current_step"] == "deadline"
        assert "pending_description" not in data["project_context"]

    async def test_generation_failure(self, client, generator):
        generator.fail = True
        response = await say(
            client, "generate description: a CRM for dentists", context_payload("description")
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to generate project description"


class TestAuthentication:
    """Requests are tied to a user through the authentication service."""

    @pytest.fixture
    def rejecting_auth(self, client):
        app.dependency_overrides.pop(get_current_user, None)
        app.dependency_overrides[get_auth_client] = lambda: AuthClient(
            base_url="http://auth.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(401)),
        )
        return client

    async def test_rejected_token_is_unauthorized(self, rejecting_auth):
        response = await rejecting_auth.post(
            CHAT_URL,
            json={"message": "hello"},
            headers={"Authorization": "Bearer expired"},
        )
        assert response.status_code == 401

    async def test_missing_header_is_unauthorized(self, rejecting_auth):
        response = await rejecting_auth.post(GENERATE_URL, json={"project_info": "a CRM"})
        assert response.status_code == 401


class TestGenerateDescription:
    """Tests for the standalone description endpoint."""

    async def test_returns_draft(self, client, generator):
        response = await client.post(GENERATE_URL, json={"project_info": "  CRM for a clinic  "})

        assert response.status_code == 200
        assert response.json() == {"description": generator.text}
        assert generator.calls == [("draft", "CRM for a clinic")]

    async def test_empty_info_is_rejected(self, client, generator):
        response = await client.post(GENERATE_URL, json={"project_info": ""})
        assert response.status_code == 422
        assert generator.calls == []

    async def test_blank_info_is_rejected(self, client, generator):
        response = await client.post(GENERATE_URL, json={"project_info": "   "})
        assert response.status_code == 422
        assert generator.calls == []

    async def test_backend_failure(self, client, generator):
        generator.fail = True
        response = await client.post(GENERATE_URL, json={"project_info": "CRM for a clinic"})
        assert response.status_code == 502
