"""
Unit Tests for the Notes API Client.

Requests are served by httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from coldboard.backend.core.exceptions import ExternalServiceError, MalformedResponseError
from coldboard.backend.schemas.board import AllNotes, Archive, SpecificBoard
from coldboard.backend.schemas.note import NoteCreate, NoteUpdate
from coldboard.backend.services.notes_api import NotesAPIClient


def _client(handler) -> NotesAPIClient:
    return NotesAPIClient(
        base_url="http://notes.test/",
        timeout=5,
        token="secret",
        transport=httpx.MockTransport(handler),
    )


class TestFetchNotes:
    @pytest.mark.asyncio
    async def test_specific_board(self, wire_note):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"notes": [wire_note("n1", content="hi")]})

        async with _client(handler) as client:
            notes = await client.fetch_notes(SpecificBoard("b1"))

        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/boards/b1/notes"
        assert seen[0].headers["Authorization"] == "Bearer secret"
        assert seen[0].headers["X-Frontend-ID"] == "api"
        assert [n.id for n in notes] == ["n1"]
        assert notes[0].content == "hi"
        assert notes[0].author.id == "u1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("scope", "path"), [
        (AllNotes(), "/api/boards/all-notes/notes"),
        (Archive(), "/api/boards/archive/notes"),
    ])
    async def test_pseudo_boards(self, scope, path):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"notes": []})

        async with _client(handler) as client:
            assert await client.fetch_notes(scope) == []
        assert paths == [path]

    @pytest.mark.asyncio
    async def test_cross_board_listing_carries_board_id(self, wire_note):
        body = wire_note("n1", board={"id": "b9", "name": "Ops"})
        del body["boardId"]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"notes": [body]})

        async with _client(handler) as client:
            notes = await client.fetch_notes(AllNotes())

        assert notes[0].board_id == "b9"

    @pytest.mark.asyncio
    async def test_checklist_items_are_parsed(self, wire_note):
        body = wire_note("n1", checklistItems=[
            {"id": "i1", "content": "milk", "checked": True, "order": 0},
        ])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"notes": [body]})

        async with _client(handler) as client:
            note = (await client.fetch_notes(SpecificBoard("b1")))[0]

        assert note.is_checklist
        assert note.checklist_items[0].text == "milk"
        assert note.checklist_items[0].completed is True


class TestWrites:
    @pytest.mark.asyncio
    async def test_quick_create(self, wire_note):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"note": wire_note("new")})

        async with _client(handler) as client:
            note = await client.create_note("b1")

        assert (seen[0].method, seen[0].url.path) == ("POST", "/api/boards/b1/notes/quick")
        assert note.id == "new"

    @pytest.mark.asyncio
    async def test_create_with_content(self, wire_note):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"note": wire_note("new", content="hello")})

        async with _client(handler) as client:
            await client.create_note("b1", NoteCreate(content="hello"))

        assert seen[0].url.path == "/api/boards/b1/notes"
        assert json.loads(seen[0].content) == {"content": "hello", "boardId": "b1"}

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self, wire_note):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"note": wire_note("n1")})

        async with _client(handler) as client:
            await client.update_note("b1", "n1", NoteUpdate(archived_at=None))

        assert (seen[0].method, seen[0].url.path) == ("PUT", "/api/boards/b1/notes/n1")
        assert json.loads(seen[0].content) == {"archivedAt": None}

    @pytest.mark.asyncio
    async def test_delete(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        async with _client(handler) as client:
            assert await client.delete_note("b1", "n1") is None

        assert (seen[0].method, seen[0].url.path) == ("DELETE", "/api/boards/b1/notes/n1")


class TestFailures:
    """Every failure surfaces as ExternalServiceError."""

    @pytest.mark.asyncio
    async def test_error_status_carries_server_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "Note not found"})

        async with _client(handler) as client:
            with pytest.raises(ExternalServiceError) as exc_info:
                await client.delete_note("b1", "n1")

        assert exc_info.value.status_code == 404
        assert exc_info.value.server_message == "Note not found"
        assert exc_info.value.message == "Note not found"

    @pytest.mark.asyncio
    async def test_error_status_without_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="Internal Server Error")

        async with _client(handler) as client:
            with pytest.raises(ExternalServiceError) as exc_info:
                await client.fetch_notes(SpecificBoard("b1"))

        assert exc_info.value.server_message is None
        assert exc_info.value.message == "Notes API returned 500"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ExternalServiceError, match="Could not reach"):
                await client.fetch_notes(SpecificBoard("b1"))

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"unexpected": True})

        async with _client(handler) as client:
            with pytest.raises(MalformedResponseError):
                await client.fetch_notes(SpecificBoard("b1"))

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        async with _client(handler) as client:
            with pytest.raises(MalformedResponseError):
                await client.create_note("b1")


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        client = _client(lambda request: httpx.Response(200, json={"notes": []}))
        await client.fetch_notes(SpecificBoard("b1"))
        await client.close()
        await client.close()
        assert client._client is None

    def test_base_url_trailing_slash_is_stripped(self):
        assert _client(lambda request: httpx.Response(200)).base_url == "http://notes.test"
