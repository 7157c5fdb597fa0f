"""Terminal chat client.

Usage::

    freechat-chat --url http://127.0.0.1:8000

Type a message and press enter.  Commands:

    /attach <path> [<path> ...]   attach files to the next message
    /new                          start a new chat
    /usage                        show the server's usage counter
    /quit                         exit
"""

from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
from pathlib import Path

import httpx
from loguru import logger

from ..models.chat_message import ChatMessage, FileRef
from ..models.enums import MessageRole
from ..models.transcript import ChatHistory
from .chat_client import ChatClient
from .file_upload import FileUploadHandler
from .transcript_store import DEFAULT_HISTORY_PATH, TranscriptStore

ATTACH_USAGE = "Usage: /attach <path> [<path> ...]"


def parse_attach(text: str) -> list[str] | None:
    """Return the paths named by an ``/attach`` line, or ``None`` for other input.

    Paths may be quoted.  Unbalanced quotes raise ``ValueError``.
    """
    if text.split(maxsplit=1)[0] != "/attach":
        return None
    return shlex.split(text)[1:]


def _print_token(token: str) -> None:
    sys.stdout.write(token)
    sys.stdout.flush()


def _render(history: ChatHistory) -> None:
    for message in history.current().messages:
        label = "you" if message.role == MessageRole.USER else "assistant"
        print(f"{label}> {message.content}")


async def run_repl(client: ChatClient, store: TranscriptStore) -> None:
    history = store.load()
    uploads = FileUploadHandler()
    pending: list[FileRef] = []
    _render(history)

    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, input, "you> ")
        text = line.strip()
        if not text:
            continue

        if text == "/quit":
            return
        if text == "/new":
            history.new_chat()
            store.save(history)
            _render(history)
            continue
        if text == "/usage":
            try:
                stats = await client.usage()
            except httpx.HTTPError as exc:
                print(f"Could not fetch usage: {exc}")
                continue
            print(
                f"{stats.used}/{stats.limit} requests used, {stats.remaining} left, "
                f"resets at {stats.reset_time:%Y-%m-%d %H:%M}"
            )
            continue
        try:
            paths = parse_attach(text)
        except ValueError as exc:
            print(f"Could not parse command: {exc}. {ATTACH_USAGE}")
            continue
        if paths is not None:
            if not paths:
                print(ATTACH_USAGE)
                continue
            result = uploads.handle_files(paths)
            for error in result.errors:
                print(f"Rejected {error.file_name}: {error.reason}")
            for attachment in result.files:
                print(f"Attached {attachment.name}")
            pending.extend(result.files)
            continue

        chat = history.current()
        chat.messages.append(
            ChatMessage(role=MessageRole.USER, content=text, attachments=pending or None)
        )
        pending = []
        store.save(history)

        sys.stdout.write("assistant> ")
        outcome = await client.send(chat.messages, on_token=_print_token)
        if not outcome.ok:
            sys.stdout.write(chat.messages[-1].content)
        sys.stdout.write("\n")
        if outcome.stats is not None:
            print(f"({outcome.stats.used}/{outcome.stats.limit} requests used today)")
        store.save(history)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Chat with a freechat server from the terminal")
    parser.add_argument("--url", default="http://127.0.0.1:8000", help="Server base URL")
    parser.add_argument(
        "--history",
        type=Path,
        default=DEFAULT_HISTORY_PATH,
        help="Chat history file (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Show client debug logs")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "ERROR")

    try:
        asyncio.run(run_repl(ChatClient(base_url=args.url), TranscriptStore(args.history)))
    except (KeyboardInterrupt, EOFError):
        print()


if __name__ == "__main__":
    main()
