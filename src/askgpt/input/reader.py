"""Line-mode input reader.

Turns raw lines from an interactive source into one logical message:

- A plain line is a complete message.
- A line ending in a backslash continues on the next line.
- ``:paste`` as the first line switches to paste mode, where every line is
  taken literally until a line reading ``:end``.

End-of-input never discards what was typed: whatever has been buffered is
returned, and an empty string signals that nothing was read at all.
"""

import logging
from collections.abc import Callable
from enum import Enum

from ..errors import InputReadError

logger = logging.getLogger(__name__)

PASTE_COMMAND = ":paste"
PASTE_TERMINATOR = ":end"
QUIT_COMMAND = "quit"
CONTINUATION = "\\"

PASTE_HINT = 'Paste mode: end with a single line ":end"\n'

# readline-style: returns one line including its newline, "" at end-of-input
LineSource = Callable[[], str]


class InputMode(str, Enum):
    """State of the reader while assembling a message."""

    NORMAL = "normal"
    PASTE = "paste"


def is_quit(message: str) -> bool:
    """Check whether an assembled message asks to end the session."""
    return message.strip() == QUIT_COMMAND


class LineReader:
    """Assemble messages from a line source.

    The source is held for the reader's lifetime; each call to
    :meth:`read_message` starts from a fresh buffer in normal mode.

    Example:
        reader = LineReader(sys.stdin.readline, notice=stderr.write)
        message = reader.read_message()
    """

    def __init__(self, source: LineSource, notice: Callable[[str], object] | None = None):
        """Initialize the reader.

        Args:
            source: Callable returning the next raw line, or "" at end-of-input
            notice: Optional callable receiving hints for the user (paste mode)
        """
        self._source = source
        self._notice = notice
        self._mode = InputMode.NORMAL
        self._lines: list[str] = []
        self._exhausted = False

    @property
    def mode(self) -> InputMode:
        """Current mode (NORMAL between messages)."""
        return self._mode

    @property
    def exhausted(self) -> bool:
        """True once the source has reported end-of-input."""
        return self._exhausted

    def read_message(self) -> str:
        """Read one logical message.

        Returns:
            The message lines joined with newlines; "" if end-of-input came
            before anything was read

        Raises:
            InputReadError: If the source fails for a reason other than
                end-of-input
        """
        self._mode = InputMode.NORMAL
        self._lines = []
        try:
            while True:
                raw = self._readline()
                if raw is None:
                    break
                if self._mode is InputMode.PASTE:
                    if self._feed_paste(raw):
                        break
                elif self._feed_normal(raw):
                    break
            return "\n".join(self._lines)
        finally:
            self._mode = InputMode.NORMAL
            self._lines = []

    def _readline(self) -> str | None:
        """Read one raw line; None at end-of-input.

        A final line without newline is still returned; the next call then
        reports end-of-input.
        """
        try:
            raw = self._source()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"cannot read input: {e}") from e
        if raw == "":
            self._exhausted = True
            return None
        if not raw.endswith("\n"):
            self._exhausted = True
        return raw

    def _feed_normal(self, raw: str) -> bool:
        """Consume a line in normal mode. Returns True when the message is complete."""
        line = raw.rstrip("\r\n")
        at_eof = not raw.endswith("\n")

        if not self._lines and line.strip() == PASTE_COMMAND and not at_eof:
            logger.debug("entering paste mode")
            self._mode = InputMode.PASTE
            if self._notice is not None:
                self._notice(PASTE_HINT)
            return False

        if at_eof:
            # partial last line: salvage it as typed
            if line:
                self._lines.append(line)
            return True

        if line.endswith(CONTINUATION):
            self._lines.append(line[: -len(CONTINUATION)])
            return False

        self._lines.append(line)
        return True

    def _feed_paste(self, raw: str) -> bool:
        """Consume a line in paste mode. Returns True when the block is closed."""
        line = raw.rstrip("\r\n")
        if line.strip() == PASTE_TERMINATOR:
            return True
        if not raw.endswith("\n"):
            if line:
                self._lines.append(line)
            return True
        self._lines.append(line)
        return False
