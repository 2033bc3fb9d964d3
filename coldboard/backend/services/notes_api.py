"""
Notes API Client.

Async HTTP client for the upstream REST API that owns boards and notes.
The board engine only talks to it through the NotesRemote protocol, so tests
and alternative backends can substitute their own implementation.

Routes:
    GET    /api/boards/{id|all-notes|archive}/notes
    POST   /api/boards/{id}/notes/quick         (empty quick note)
    POST   /api/boards/{id}/notes               (note with content)
    PUT    /api/boards/{id}/notes/{noteId}
    DELETE /api/boards/{id}/notes/{noteId}

Every failure (transport error, non-2xx status, unexpected body) surfaces as
ExternalServiceError. Nothing is retried here.
"""

from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel

from coldboard.backend.core.config import get_notes_api_url, get_settings
from coldboard.backend.core.exceptions import ExternalServiceError, MalformedResponseError
from coldboard.backend.core.logging import get_logger
from coldboard.backend.schemas.board import BoardScope
from coldboard.backend.schemas.note import (
    Note,
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteUpdate,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class NotesRemote(Protocol):
    """Remote collaborator used by the mutation controller."""

    async def fetch_notes(self, scope: BoardScope) -> list[Note]: ...

    async def create_note(self, board_id: str, data: NoteCreate | None = None) -> Note: ...

    async def update_note(self, board_id: str, note_id: str, changes: NoteUpdate) -> Note: ...

    async def delete_note(self, board_id: str, note_id: str) -> None: ...


def _server_message(response: httpx.Response) -> str | None:
    """The API's ``{"error": "..."}`` text, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


def _parse(model: type[ModelT], response: httpx.Response) -> ModelT:
    try:
        return model.model_validate(response.json())
    except ValueError as e:
        # json decode errors and pydantic ValidationError are both ValueErrors
        logger.warning(
            "Malformed notes API response",
            extra={"path": response.request.url.path, "error": str(e)},
        )
        raise MalformedResponseError() from e


class NotesAPIClient:
    """
    HTTP client for the notes REST API.

    Usage:
        async with NotesAPIClient() as client:
            notes = await client.fetch_notes(SpecificBoard("b1"))
            note = await client.create_note("b1")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL. If None, reads application.yaml notes_api.
            timeout: Request timeout in seconds. If None, reads application.yaml.
            token: Bearer token. If None, reads NOTES_API_TOKEN from config/.env.
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        if base_url is None or timeout is None:
            config_base_url, config_timeout = get_notes_api_url()
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout
        if token is None:
            token = get_settings().notes_api_token

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "NotesAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"X-Frontend-ID": "api"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = self._get_client()
        logger.debug("Notes API request", extra={"method": method, "path": path})

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Notes API request failed",
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise ExternalServiceError("Could not reach the notes API") from e

        logger.debug(
            "Notes API response",
            extra={"method": method, "path": path, "status_code": response.status_code},
        )

        if response.is_error:
            server_message = _server_message(response)
            raise ExternalServiceError(
                server_message or f"Notes API returned {response.status_code}",
                status_code=response.status_code,
                server_message=server_message,
            )
        return response

    async def fetch_notes(self, scope: BoardScope) -> list[Note]:
        response = await self._request("GET", f"/api/boards/{scope.slug}/notes")
        return _parse(NoteListEnvelope, response).notes

    async def create_note(self, board_id: str, data: NoteCreate | None = None) -> Note:
        if data is None or data.is_quick:
            response = await self._request("POST", f"/api/boards/{board_id}/notes/quick")
        else:
            body = data.model_dump(exclude_none=True)
            body["boardId"] = board_id
            response = await self._request("POST", f"/api/boards/{board_id}/notes", json=body)
        return _parse(NoteEnvelope, response).note

    async def update_note(self, board_id: str, note_id: str, changes: NoteUpdate) -> Note:
        response = await self._request(
            "PUT",
            f"/api/boards/{board_id}/notes/{note_id}",
            json=changes.to_wire(),
        )
        return _parse(NoteEnvelope, response).note

    async def delete_note(self, board_id: str, note_id: str) -> None:
        await self._request("DELETE", f"/api/boards/{board_id}/notes/{note_id}")


_client: NotesAPIClient | None = None


def get_notes_client() -> NotesAPIClient:
    """Get or create the shared notes API client."""
    global _client
    if _client is None:
        _client = NotesAPIClient()
    return _client


async def close_notes_client() -> None:
    """Close the shared notes API client."""
    global _client
    if _client:
        await _client.close()
        _client = None
