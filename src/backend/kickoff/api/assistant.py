"""Project assistant API router.

The chat endpoint is stateless: the client sends the conversation context it
received from the previous turn and gets the updated context back.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from kickoff.agents.engine import CREATE_PROJECT_ACTION, ConversationEngine, EngineStateError
from kickoff.models.conversation import ConversationContext, WizardStep
from kickoff.security import InputSanitizer
from kickoff.services.auth_service import AuthClient, AuthenticatedUser, AuthenticationError
from kickoff.services.description_generator import DescriptionGenerator, GenerationError
from kickoff.services.project_storage import ProjectCreationError, ProjectStorageClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai/project", tags=["assistant"])


# Request/Response models
class ChatRequest(BaseModel):
    message: str = ""
    context: ConversationContext | None = None


class ChatResponse(BaseModel):
    message: str
    project_context: ConversationContext
    suggested_action: str | None = None
    error: str | None = None


class GenerateDescriptionRequest(BaseModel):
    project_info: str = Field(..., min_length=1, max_length=InputSanitizer.MAX_PROJECT_INFO_LENGTH)


class GenerateDescriptionResponse(BaseModel):
    description: str


# Dependencies
@lru_cache
def get_description_generator() -> DescriptionGenerator:
    return DescriptionGenerator()


@lru_cache
def get_engine() -> ConversationEngine:
    return ConversationEngine(description_generator=get_description_generator())


@lru_cache
def get_project_storage() -> ProjectStorageClient:
    return ProjectStorageClient()


@lru_cache
def get_auth_client() -> AuthClient:
    return AuthClient()


def get_current_user(
    authorization: str | None = Header(None),
    auth_client: AuthClient = Depends(get_auth_client),
) -> AuthenticatedUser:
    """Resolve the acting user or reject the request with 401."""
    try:
        return auth_client.verify(authorization)
    except AuthenticationError as e:
        logger.warning(f"Unauthorized assistant request: {e}")
        raise HTTPException(status_code=401, detail="Unauthorized")


# Endpoints
@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
def chat_with_assistant(
    data: ChatRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    engine: ConversationEngine = Depends(get_engine),
    storage: ProjectStorageClient = Depends(get_project_storage),
):
    """Process one wizard turn and create the project once it is confirmed."""
    try:
        result = engine.advance(data.message, data.context)
    except GenerationError as e:
        logger.warning(f"Description generation failed for user {user.id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate project description")
    except EngineStateError:
        logger.exception("Conversation engine failed")
        raise HTTPException(status_code=500, detail="Internal assistant error")

    response = ChatResponse(
        message=result.reply,
        project_context=result.context,
        suggested_action=result.suggested_action,
    )

    if result.suggested_action == CREATE_PROJECT_ACTION:
        try:
            storage.create_project(result.context.project_data, user.token)
        except ProjectCreationError as e:
            logger.error(f"Project creation failed for user {user.id}: {e}")
            response.error = str(e)
            return JSONResponse(
                status_code=502,
                content=response.model_dump(mode="json", exclude_none=True),
            )

        logger.info(f"Created project '{result.context.project_data.name}' for user {user.id}")
        response.project_context.current_step = WizardStep.TERMINAL
        response.message = f"✅ Project \"{result.context.project_data.name}\" has been created!"

    return response


@router.post("/generate-description", response_model=GenerateDescriptionResponse)
def generate_description(
    data: GenerateDescriptionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    generator: DescriptionGenerator = Depends(get_description_generator),
):
    """Draft a project description from free-form project information."""
    project_info = InputSanitizer.sanitize_project_info(data.project_info)
    if not project_info:
        raise HTTPException(status_code=422, detail="project_info must not be blank")

    try:
        description = generator.draft(project_info)
    except GenerationError as e:
        logger.warning(f"Description drafting failed for user {user.id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate project description")

    return GenerateDescriptionResponse(description=description)
