"""Tests for the transcript and the conversation loop."""
import asyncio
import io

import httpx
import pytest
from pydantic import ValidationError

from askgpt.chat import ChatSession, Transcript
from askgpt.chat.session import ASSISTANT_MARKER, FAREWELL
from askgpt.errors import APIStatusError, NoInputError, RequestTimeoutError
from askgpt.input import LineReader
from askgpt.llm import ChatMessage, LLMProvider, StreamingResponse

from .conftest import RecordingServer, sse_body


class ScriptedProvider(LLMProvider):
    """Provider replaying canned replies and recording each transcript."""

    def __init__(self, *replies: list[str]):
        self._replies = list(replies)
        self.calls: list[list[ChatMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "scripted"

    async def chat_completion_stream(self, messages, **kwargs):
        self.calls.append(list(messages))
        deltas = self._replies.pop(0)

        async def _gen():
            for delta in deltas:
                yield delta

        return StreamingResponse(_gen())

    async def close(self) -> None:
        self.closed = True


class StalledProvider(ScriptedProvider):
    """Provider whose stream never produces a second delta."""

    async def chat_completion_stream(self, messages, **kwargs):
        self.calls.append(list(messages))

        async def _gen():
            yield "slow"
            await asyncio.sleep(3600)
            yield "never"

        return StreamingResponse(_gen())


def make_session(provider, text: str, consoles, **kwargs) -> ChatSession:
    out, err = consoles
    reader = LineReader(io.StringIO(text).readline)
    return ChatSession(provider, reader, out=out, err=err, **kwargs)


class TestTranscript:
    """Tests for Transcript."""

    def test_append_order(self):
        """Test that messages keep their order and roles."""
        transcript = Transcript()
        transcript.add_user("q1")
        transcript.add_assistant("a1")
        transcript.add_user("q2")

        assert [(m.role, m.content) for m in transcript] == [
            ("user", "q1"), ("assistant", "a1"), ("user", "q2")
        ]
        assert len(transcript) == 3

    def test_snapshot_is_detached(self):
        """Test that the messages list cannot alter the transcript."""
        transcript = Transcript()
        transcript.add_user("q")
        snapshot = transcript.messages
        snapshot.clear()
        assert len(transcript) == 1

    def test_messages_are_immutable(self):
        """Test that a recorded message cannot be changed."""
        message = Transcript().add_user("q")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore[misc]


class TestChatSession:
    """Tests for ChatSession.run()."""

    @pytest.mark.asyncio
    async def test_quit_first_sends_nothing(self, consoles):
        """Test that quitting at the first prompt makes no request."""
        provider = ScriptedProvider()
        session = make_session(provider, "  quit \n", consoles)

        transcript = await session.run("chat")

        assert provider.calls == []
        assert len(transcript) == 0
        assert FAREWELL in consoles[1].file.getvalue()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "\n", "   \n", ":paste\n:end\n"])
    async def test_blank_first_message(self, consoles, text):
        """Test that a blank first message is fatal."""
        provider = ScriptedProvider()
        session = make_session(provider, text, consoles)

        with pytest.raises(NoInputError, match="No input received"):
            await session.run("chat")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_two_turns(self, consoles):
        """Test a full two-turn conversation."""
        provider = ScriptedProvider(["Hel", "lo"], ["Fine"])
        session = make_session(provider, "hi\nhow are you\nquit\n", consoles)

        transcript = await session.run("chat")

        assert [(m.role, m.content) for m in transcript] == [
            ("user", "hi"),
            ("assistant", "Hello"),
            ("user", "how are you"),
            ("assistant", "Fine"),
        ]
        assert len(provider.calls) == 2
        assert len(provider.calls[1]) == 3

        out = consoles[0].file.getvalue()
        assert out == f"{ASSISTANT_MARKER}Hello\n{ASSISTANT_MARKER}Fine\n"
        err = consoles[1].file.getvalue()
        assert "Your message:" in err
        assert "Your next message:" in err
        assert err.rstrip().endswith(FAREWELL)

    @pytest.mark.asyncio
    async def test_template_applied_once(self, consoles):
        """Test that only the first message is templated."""
        provider = ScriptedProvider(["一"], ["二"])
        session = make_session(provider, "first\nsecond\nquit\n", consoles)

        await session.run("summarize")

        first_call, second_call = provider.calls
        assert first_call[0].content == "总结下面的内容：\n\nfirst"
        assert second_call[2].content == "second"

    @pytest.mark.asyncio
    async def test_blank_later_message_is_skipped(self, consoles):
        """Test that blank follow-ups are not sent."""
        provider = ScriptedProvider(["a"], ["b"])
        session = make_session(provider, "q1\n\n   \nq2\nquit\n", consoles)

        transcript = await session.run("chat")

        assert len(provider.calls) == 2
        assert [m.content for m in transcript if m.role == "user"] == ["q1", "q2"]

    @pytest.mark.asyncio
    async def test_end_of_input_ends_session(self, consoles):
        """Test that running out of input after a reply ends cleanly."""
        provider = ScriptedProvider(["a"])
        session = make_session(provider, "q1\n", consoles)

        transcript = await session.run("chat")

        assert len(provider.calls) == 1
        assert len(transcript) == 2

    @pytest.mark.asyncio
    async def test_multiline_message(self, consoles):
        """Test that continuation and paste input reach the provider intact."""
        provider = ScriptedProvider(["a"], ["b"])
        text = "line one\\\nline two\n:paste\nx \\\ny\n:end\nquit\n"
        session = make_session(provider, text, consoles)

        await session.run("chat")

        assert provider.calls[0][0].content == "line one\nline two"
        assert provider.calls[1][2].content == "x \\\ny"

    @pytest.mark.asyncio
    async def test_reply_without_text(self, consoles):
        """Test that an empty reply is still recorded."""
        provider = ScriptedProvider([])
        session = make_session(provider, "hi\nquit\n", consoles)

        transcript = await session.run("chat")

        assert transcript.messages[-1] == ChatMessage(role="assistant", content="")

    @pytest.mark.asyncio
    async def test_timeout_keeps_partial_text(self, consoles, settings):
        """Test that an exchange over the deadline fails with what arrived."""
        provider = StalledProvider()
        session = make_session(
            provider, "hi\n", consoles, settings=settings.model_copy(update={"timeout": 0.05})
        )

        with pytest.raises(RequestTimeoutError) as exc_info:
            await session.run("chat")

        assert exc_info.value.partial_text == "slow"
        assert consoles[0].file.getvalue() == f"{ASSISTANT_MARKER}slow\n"


class TestChatSessionOverHTTP:
    """Tests running the loop against the real provider with a mock transport."""

    @pytest.mark.asyncio
    async def test_second_message_sent_unmodified(self, make_provider, consoles):
        """Test the wire bodies of a templated two-turn session."""
        server = RecordingServer(
            httpx.Response(200, content=sse_body("Hel", "lo")),
            httpx.Response(200, content=sse_body("Bye", done=False)),
        )
        async with make_provider(server) as llm:
            session = make_session(llm, "你好\nthanks\nquit\n", consoles)
            await session.run("translate-en")

        first, second = server.bodies()
        assert first["messages"] == [
            {"role": "user", "content": "Translate the following text into English:\n\n你好"}
        ]
        assert second["messages"][1:] == [
            {"role": "assistant", "content": "Hello"},
            {"role": "user", "content": "thanks"},
        ]
        assert consoles[0].file.getvalue() == f"{ASSISTANT_MARKER}Hello\n{ASSISTANT_MARKER}Bye\n"

    @pytest.mark.asyncio
    async def test_api_error_is_fatal(self, make_provider, consoles):
        """Test that a status error stops the session with nothing printed."""
        server = RecordingServer(httpx.Response(429, text="rate limited"))
        async with make_provider(server) as llm:
            session = make_session(llm, "hi\nagain\n", consoles)
            with pytest.raises(APIStatusError, match=r"api error \(429\): rate limited"):
                await session.run("chat")

        assert len(server.requests) == 1
        assert consoles[0].file.getvalue() == ""
        assert len(session.transcript) == 1
