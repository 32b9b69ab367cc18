"""Browser session API: UI events in, rendered view out."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from lumina.core.middleware import SESSION_PATH_PREFIX
from lumina.dependencies import get_client_id, get_client_registry, get_lumina_client
from lumina.presentation.view_renderer import render_view
from lumina.schemas.response_schema import ApiResponse, success_response
from lumina.schemas.session_schema import (
    RenameConversationRequest,
    SendMessageRequest,
    SignInRequest,
    SignUpRequest,
)
from lumina.schemas.view_schema import SessionView
from lumina.services.client_registry import ClientRegistry, LuminaClient
from lumina.state.store import ClientState

router = APIRouter(prefix=SESSION_PATH_PREFIX, tags=["session"])

LuminaClientDep = Annotated[LuminaClient, Depends(get_lumina_client)]
ClientRegistryDep = Annotated[ClientRegistry, Depends(get_client_registry)]


def _view(client: LuminaClient, message: str = "Success") -> dict:
    return success_response(render_view(client.state), message=message)


@router.get("/view", response_model=ApiResponse[SessionView])
async def get_view(
    registry: ClientRegistryDep,
    client_id: Annotated[str, Depends(get_client_id)],
) -> dict:
    """Current screen for this browser."""
    if registry.missing_settings:
        view = render_view(ClientState(), missing_settings=registry.missing_settings)
        return success_response(view)
    # A browser without a client has nothing to show beyond the sign-in form.
    if registry.get(client_id) is None:
        return success_response(render_view(ClientState()))
    client = await registry.get_or_create(client_id)
    return _view(client)


@router.post("/sign-in", response_model=ApiResponse[SessionView])
async def sign_in(body: SignInRequest, client: LuminaClientDep) -> dict:
    """Authenticate with email and password."""
    await client.sign_in(body.email, body.password)
    return _view(client)


@router.post(
    "/sign-up",
    response_model=ApiResponse[SessionView],
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(body: SignUpRequest, client: LuminaClientDep) -> dict:
    """Register a new account."""
    await client.sign_up(body.email, body.password, body.username)
    return success_response(render_view(client.state), status=201)


@router.post("/sign-out", response_model=ApiResponse[SessionView])
async def sign_out(client: LuminaClientDep) -> dict:
    """End the session and clear all client state."""
    await client.sign_out()
    return _view(client)


@router.post("/conversations", response_model=ApiResponse[SessionView])
async def new_conversation(client: LuminaClientDep) -> dict:
    """Start and open an empty conversation."""
    await client.chat.new_conversation()
    return _view(client)


@router.post(
    "/conversations/{conversation_id}/select",
    response_model=ApiResponse[SessionView],
)
async def select_conversation(conversation_id: str, client: LuminaClientDep) -> dict:
    """Open a conversation and load its messages."""
    await client.select_conversation(conversation_id)
    return _view(client)


@router.delete("/selection", response_model=ApiResponse[SessionView])
async def clear_selection(client: LuminaClientDep) -> dict:
    """Close the open conversation."""
    await client.select_conversation(None)
    return _view(client)


@router.patch(
    "/conversations/{conversation_id}/title",
    response_model=ApiResponse[SessionView],
)
async def rename_conversation(
    conversation_id: str,
    body: RenameConversationRequest,
    client: LuminaClientDep,
) -> dict:
    """Rename a conversation."""
    renamed = await client.chat.rename_conversation(conversation_id, body.title)
    return _view(client, message="Title updated" if renamed else "Title unchanged")


@router.delete(
    "/conversations/{conversation_id}",
    response_model=ApiResponse[SessionView],
)
async def delete_conversation(conversation_id: str, client: LuminaClientDep) -> dict:
    """Delete a conversation."""
    await client.chat.delete_conversation(conversation_id)
    return _view(client)


@router.post("/messages", response_model=ApiResponse[SessionView])
async def send_message(body: SendMessageRequest, client: LuminaClientDep) -> dict:
    """Send the composer text and wait for the assistant reply."""
    sent = await client.chat.send_message(body.content)
    return _view(client, message="Message sent" if sent else "Message not sent")
