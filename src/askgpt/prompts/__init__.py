"""Prompt templates for askgpt tasks.

Instructions live in text files next to this module, one per task, so they
can be edited without touching code. A task is selected by the first
command-line argument; anything that is not a known task is sent as typed.
"""

from functools import lru_cache
from pathlib import Path

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent

# Task name -> help text. Tasks without an instruction file send the body as-is.
TASKS: dict[str, str] = {
    "chat": "Start a chat session without prompt template",
    "translate-en": "Translate text to English",
    "translate-zh": "Translate text to Chinese",
    "summarize": "Summarize content",
    "explain": "Explain content",
}


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str | None:
    """Load the instruction for a task.

    Args:
        name: Task name (without .txt extension)

    Returns:
        Instruction text with trailing whitespace removed, or None when the
        task has no instruction file
    """
    path = _PROMPTS_DIR / f"{name}.txt"
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8").rstrip()


def template(task: str, body: str) -> str:
    """Wrap ``body`` in the instruction for ``task``.

    Unknown tasks are not an error: the body is returned unchanged, which is
    how a free-form prompt reaches the model.

    Examples:
        >>> template("translate-en", "你好")
        'Translate the following text into English:\\n\\n你好'
        >>> template("whatever", "hi")
        'hi'
    """
    if task not in TASKS:
        return body
    instruction = load_prompt(task)
    if not instruction:
        return body
    return f"{instruction}\n\n{body}"


__all__ = [
    "TASKS",
    "load_prompt",
    "template",
]
