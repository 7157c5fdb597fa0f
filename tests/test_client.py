from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from freechat.client import ChatClient, FileUploadHandler, TranscriptStore
from freechat.client.chat_client import GENERIC_ERROR_REPLY
from freechat.client.cli import ATTACH_USAGE, parse_attach, run_repl
from freechat.models.chat_message import ChatMessage
from freechat.models.enums import MessageRole
from freechat.models.transcript import WELCOME_MESSAGE, ChatHistory
from freechat.utils.error_handler import FileValidationError

from .conftest import FakeProvider


def _transcript(text: str = "hi") -> list[ChatMessage]:
    return [ChatMessage(role=MessageRole.USER, content=text)]


# ---------------------------------------------------------------------------
# ChatClient


async def test_client_streams_reply_into_transcript(make_app) -> None:
    provider = FakeProvider("hello world foo")
    client = ChatClient(base_url="http://test", transport=httpx.ASGITransport(app=make_app(provider=provider)))
    transcript = _transcript()
    tokens: list[str] = []

    outcome = await client.send(transcript, on_token=tokens.append)

    assert outcome.ok
    assert tokens == ["hello ", "world ", "foo "]
    assert transcript[-1].role == MessageRole.ASSISTANT
    assert transcript[-1].content == "hello world foo "
    assert outcome.reply == "hello world foo "
    assert len(transcript) == 2


async def test_client_surfaces_quota_warning(make_app) -> None:
    app = make_app(daily_limit=1)
    client = ChatClient(base_url="http://test", transport=httpx.ASGITransport(app=app))
    await client.send(_transcript())
    transcript = _transcript("again")

    outcome = await client.send(transcript)

    assert not outcome.ok
    assert outcome.status_code == 429
    assert outcome.stats is not None
    assert outcome.stats.used == 1
    assert outcome.stats.remaining == 0
    assert len(transcript) == 2
    assert "You've used 1/1 requests today" in transcript[-1].content


async def test_client_generic_error_on_server_failure() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="Internal Server Error"))
    client = ChatClient(base_url="http://test", transport=transport)
    transcript = _transcript()

    outcome = await client.send(transcript)

    assert not outcome.ok
    assert outcome.status_code == 500
    assert transcript[-1].content == GENERIC_ERROR_REPLY
    assert len(transcript) == 2


async def test_client_generic_error_on_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = ChatClient(base_url="http://test", transport=httpx.MockTransport(handler))
    transcript = _transcript()

    outcome = await client.send(transcript)

    assert not outcome.ok
    assert [message.content for message in transcript] == ["hi", GENERIC_ERROR_REPLY]


async def test_client_skips_malformed_lines() -> None:
    body = b'0:"a "\n0:{bad\n0:"b "\n'
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body))
    client = ChatClient(base_url="http://test", transport=transport)
    transcript = _transcript()

    outcome = await client.send(transcript)

    assert outcome.ok
    assert transcript[-1].content == "a b "


async def test_client_sends_attachments_with_wire_names() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, content=b'0:"ok "\n')

    client = ChatClient(base_url="http://test", transport=httpx.MockTransport(handler))
    message = ChatMessage.model_validate(
        {
            "role": "user",
            "content": "file",
            "files": [{"name": "a.txt", "type": "text/plain", "size": 2, "content": "aGk="}],
        }
    )

    await client.send([message])

    assert seen["messages"][0]["files"][0] == {
        "name": "a.txt",
        "type": "text/plain",
        "size": 2,
        "content": "aGk=",
    }


async def test_client_usage(make_app) -> None:
    client = ChatClient(base_url="http://test", transport=httpx.ASGITransport(app=make_app(daily_limit=3)))

    stats = await client.usage()

    assert stats.used == 0
    assert stats.limit == 3


# ---------------------------------------------------------------------------
# FileUploadHandler


def test_oversized_attachment_rejected_before_sending(tmp_path: Path) -> None:
    big = tmp_path / "big.pdf"
    with big.open("wb") as handle:
        handle.truncate(25 * 1024 * 1024)

    with pytest.raises(FileValidationError) as exc_info:
        FileUploadHandler().handle_file(big)

    assert "20MB" in exc_info.value.reason


def test_unsupported_type_rejected(tmp_path: Path) -> None:
    script = tmp_path / "run.exe"
    script.write_bytes(b"MZ")

    with pytest.raises(FileValidationError) as exc_info:
        FileUploadHandler().handle_file(script)

    assert exc_info.value.reason.startswith("Unsupported file type")


def test_valid_file_is_encoded(tmp_path: Path) -> None:
    notes = tmp_path / "notes.md"
    notes.write_text("# hi", encoding="utf-8")

    ref = FileUploadHandler().handle_file(notes)

    assert ref.name == "notes.md"
    assert ref.mime_type == "text/markdown"
    assert ref.size_bytes == 4
    assert ref.base64_content == "IyBoaQ=="


def test_one_bad_file_does_not_block_others(tmp_path: Path) -> None:
    good = tmp_path / "data.csv"
    good.write_text("a,b\n1,2\n", encoding="utf-8")
    bad = tmp_path / "binary.bin"
    bad.write_bytes(b"\x00")
    missing = tmp_path / "missing.txt"

    result = FileUploadHandler().handle_files([bad, good, missing])

    assert [ref.name for ref in result.files] == ["data.csv"]
    assert sorted(error.file_name for error in result.errors) == ["binary.bin", "missing.txt"]


# ---------------------------------------------------------------------------
# TranscriptStore


@pytest.mark.parametrize(
    "content",
    [None, b"", b"{not json", b'{"chats": []}', b'{"chats": "nope"}', b'{"chats": [\xff\xfe]}'],
    ids=["missing", "empty", "bad-json", "no-chats", "wrong-shape", "invalid-utf8"],
)
def test_store_recovers_with_welcome_transcript(tmp_path: Path, content: bytes | None) -> None:
    path = tmp_path / "history.json"
    if content is not None:
        path.write_bytes(content)

    history = TranscriptStore(path).load()

    chat = history.current()
    assert len(history.chats) == 1
    assert [message.content for message in chat.messages] == [WELCOME_MESSAGE]
    assert history.current_chat_id == chat.id


def test_store_round_trips_history(tmp_path: Path) -> None:
    store = TranscriptStore(tmp_path / "nested" / "history.json")
    history = ChatHistory.fresh()
    history.current().messages.append(ChatMessage(role=MessageRole.USER, content="hello"))
    second = history.new_chat()

    store.save(history)
    loaded = store.load()

    assert loaded.current_chat_id == second.id
    assert [chat.title for chat in loaded.chats] == ["New Chat", "hello"]


# ---------------------------------------------------------------------------
# CLI


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("/attach a.txt", ["a.txt"]),
        ('/attach "my file.txt" b.md', ["my file.txt", "b.md"]),
        ("/attach", []),
        ("/attachment a.txt", None),
        ("hello /attach a.txt", None),
    ],
)
def test_parse_attach(line: str, expected: list[str] | None) -> None:
    assert parse_attach(line) == expected


def test_parse_attach_rejects_unbalanced_quotes() -> None:
    with pytest.raises(ValueError):
        parse_attach('/attach "my file.txt')


async def test_repl_survives_unbalanced_attach(monkeypatch, tmp_path: Path, capsys) -> None:
    lines = iter(['/attach "my file.txt', "/quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    store = TranscriptStore(tmp_path / "history.json")

    await run_repl(ChatClient(base_url="http://test"), store)

    out = capsys.readouterr().out
    assert "Could not parse command" in out
    assert ATTACH_USAGE in out
