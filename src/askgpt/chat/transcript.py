from collections.abc import Iterator

from ..llm.models import ChatMessage


class Transcript:
    """Ordered, append-only record of a conversation.

    Messages are immutable and never removed or reordered. The session adds
    them in user/assistant turns, so the transcript always starts with a
    user message.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    def add_user(self, content: str) -> ChatMessage:
        """Append a user message."""
        return self._append(ChatMessage(role="user", content=content))

    def add_assistant(self, content: str) -> ChatMessage:
        """Append an assistant message."""
        return self._append(ChatMessage(role="assistant", content=content))

    @property
    def messages(self) -> list[ChatMessage]:
        """Snapshot of the messages, oldest first."""
        return list(self._messages)

    def _append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))
