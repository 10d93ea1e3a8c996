"""Interactive chat session.

Drives the turn loop: read a message, send the whole transcript, stream the
reply to stdout, record it, and ask again until the user types ``quit``.
Prompts and hints go to stderr so stdout carries only the conversation.
"""

import asyncio
import logging

from rich.console import Console

from ..config import ChatSettings
from ..errors import NoInputError, RequestTimeoutError
from ..input import LineReader, is_quit
from ..llm.base import LLMProvider
from ..llm.models import StreamingResponse
from ..prompts import template
from .transcript import Transcript

logger = logging.getLogger(__name__)

INPUT_TIPS = (
    "Input tips:\n"
    "- Single line: type and press Enter\n"
    "- Multi line: end a line with \\ to continue, or type :paste then finish with :end\n"
    "- Quit: type quit and press Enter\n"
)
FIRST_PROMPT = "Your message:\n> "
NEXT_PROMPT = "Your next message:\n> "
ASSISTANT_MARKER = "Assistant: "
FAREWELL = "Goodbye!"


class ChatSession:
    """One interactive conversation with a chat-completion provider.

    Turns are strictly sequential: a reply is fully streamed (or fails)
    before the next prompt is shown.

    Example:
        async with create_llm_provider("openai", api_key=key) as llm:
            session = ChatSession(llm, LineReader(sys.stdin.readline))
            await session.run("summarize")
    """

    def __init__(
        self,
        provider: LLMProvider,
        reader: LineReader,
        settings: ChatSettings | None = None,
        out: Console | None = None,
        err: Console | None = None,
    ):
        """Initialize the session.

        Args:
            provider: Provider that streams replies
            reader: Source of user messages
            settings: Timeout for each exchange (defaults if omitted)
            out: Console for assistant output (stdout)
            err: Console for prompts and hints (stderr)
        """
        self._provider = provider
        self._reader = reader
        self._settings = settings or ChatSettings()
        self._out = out or Console()
        self._err = err or Console(stderr=True)
        self._transcript = Transcript()

    @property
    def transcript(self) -> Transcript:
        """Messages exchanged so far."""
        return self._transcript

    async def run(self, task: str) -> Transcript:
        """Run the conversation until the user quits or input ends.

        Args:
            task: Task name selecting the template for the first message

        Returns:
            The final transcript

        Raises:
            NoInputError: If the first message is blank
            InputReadError: If reading input fails
            ProviderError: If a request or its stream fails
        """
        self._notice(INPUT_TIPS + "\n")

        self._notice(FIRST_PROMPT)
        first = self._reader.read_message()
        if not first.strip():
            raise NoInputError()
        if is_quit(first):
            self._notice(FAREWELL + "\n")
            return self._transcript

        self._transcript.add_user(template(task, first))

        while True:
            reply = await self._stream_reply()
            self._transcript.add_assistant(reply)

            self._notice("\n---\n")
            message = await self._next_message()
            if message is None:
                break
            self._transcript.add_user(message)

        self._notice("\n" + FAREWELL + "\n")
        return self._transcript

    async def _next_message(self) -> str | None:
        """Prompt until a non-blank message arrives; None means quit."""
        while True:
            self._notice(NEXT_PROMPT)
            message = self._reader.read_message()
            if is_quit(message):
                return None
            if message.strip():
                return message
            logger.debug("blank message skipped")
            if self._reader.exhausted:
                logger.debug("end of input")
                return None

    async def _stream_reply(self) -> str:
        """Stream one reply to stdout and return its text."""
        stream: StreamingResponse | None = None
        try:
            async with asyncio.timeout(self._settings.timeout):
                stream = await self._provider.chat_completion_stream(
                    self._transcript.messages
                )
                self._write(ASSISTANT_MARKER)
                async for delta in stream:
                    self._write(delta)
        except TimeoutError as e:
            raise RequestTimeoutError(
                self._settings.timeout, stream.text if stream else ""
            ) from e
        finally:
            if stream is not None:
                await stream.aclose()
                self._write("\n")

        return stream.text

    def _write(self, text: str) -> None:
        self._out.print(
            text, end="", markup=False, highlight=False, emoji=False, soft_wrap=True
        )

    def _notice(self, text: str) -> None:
        self._err.print(
            text, end="", markup=False, highlight=False, emoji=False, soft_wrap=True
        )
