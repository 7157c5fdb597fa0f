"""Client-side consumer of the chat stream."""

from .chat_client import ChatClient, ChatOutcome  # noqa: F401
from .file_upload import FileUploadHandler, UploadResult  # noqa: F401
from .stream_parser import StreamDecoder, decode_stream  # noqa: F401
from .transcript_store import TranscriptStore  # noqa: F401
