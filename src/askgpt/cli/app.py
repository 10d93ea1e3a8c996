"""Main CLI application using Typer."""
import asyncio
import sys

import typer
from dotenv import load_dotenv
from rich.console import Console

from ..chat import ChatSession
from ..config import AskGPTConfig, ChatSettings, ConfigStore, apply_env_overrides, dump_config
from ..errors import AskGPTError, ConfigError, NoInputError
from ..input import LineReader
from ..llm import create_llm_provider
from ..logger import set_debug
from .completion import completion_script

# Load environment variables
load_dotenv()

BANNER = r"""
     ___           _______. __  ___   _______ .______   .___________.
    /   \         /       ||  |/  /  /  _____||   _  \  |           |
   /  ^  \       |   (----`|  '  /  |  |  __  |  |_)  | `---|  |----`
  /  /_\  \       \   \    |    <   |  | |_ | |   ___/      |  |
 /  _____  \  .----)   |   |  .  \  |  |__| | |  |          |  |
/__/     \__\ |_______/    |__|\__\  \______| | _|          |__|
"""

# Create Typer app
app = typer.Typer(
    name="askgpt",
    help=(
        "Chat with GPT-style chat-completion APIs from the terminal.\n\n"
        "Run 'askgpt <task>' to start a session. Tasks: chat, translate-en, "
        "translate-zh, summarize, explain. Any other word sends your text as "
        "a direct prompt."
    ),
    no_args_is_help=True,
    add_completion=False,
)

# stdout carries assistant output and config dumps; everything else goes to stderr
console = Console()
err_console = Console(stderr=True)


def _say(text: str, style: str | None = None) -> None:
    err_console.print(text, style=style, markup=False, highlight=False, soft_wrap=True)


def _hint(text: str) -> None:
    err_console.print(text, end="", markup=False, highlight=False, soft_wrap=True)


def _fail(message: str, code: int = 1) -> typer.Exit:
    _say(f"Error: {message}", style="red")
    return typer.Exit(code=code)


def _ensure_config(store: ConfigStore) -> None:
    """Create the config template on first use; exits when it was just written."""
    try:
        created = store.ensure_exists()
    except ConfigError as e:
        raise _fail(str(e))
    if created:
        _say(f"Created config template at {store.path}", style="yellow")
        _say("Please fill url/model/key (edit the file or run set-url/set-model/set-key), then rerun.")
        raise typer.Exit(code=1)


def _load_runtime_config(store: ConfigStore) -> AskGPTConfig:
    _ensure_config(store)
    try:
        config = apply_env_overrides(store.load())
        config.validate_runtime()
    except ConfigError as e:
        _say(f"Error: {e}", style="red")
        _say(f"Hint: edit {store.path} or run set-url/set-model/set-key", style="dim")
        raise typer.Exit(code=1)
    return config


@app.command("show-config")
def show_config():
    """Show current configuration."""
    store = ConfigStore()
    _ensure_config(store)
    try:
        config = store.load()
    except ConfigError as e:
        raise _fail(str(e))

    # Print to stdout for piping
    console.print(dump_config(config), end="", markup=False, highlight=False, soft_wrap=True)


def _set_field(name: str, words: list[str] | None, label: str) -> None:
    value = " ".join(words or []).strip()
    if not value:
        value = typer.prompt(f"Enter {label}", default="", show_default=False, err=True)

    store = ConfigStore()
    try:
        store.set_value(name, value)
    except ConfigError as e:
        raise _fail(str(e))
    _say(f"Updated {store.path} successfully.", style="green")


@app.command("set-url")
def set_url(value: list[str] = typer.Argument(None, help="API URL (prompted if omitted)")):
    """Set OpenAI API URL."""
    _set_field("url", value, "api url")


@app.command("set-model")
def set_model(value: list[str] = typer.Argument(None, help="Model name (prompted if omitted)")):
    """Set OpenAI Model (e.g., gpt-4o)."""
    _set_field("model", value, "model")


@app.command("set-key")
def set_key(value: list[str] = typer.Argument(None, help="API key (prompted if omitted)")):
    """Set OpenAI API Key."""
    _set_field("key", value, "api key")


@app.command()
def completion(shell: str = typer.Argument("", help="bash, zsh or fish")):
    """Generate completion script."""
    try:
        script = completion_script(shell)
    except ValueError as e:
        _say(str(e), style="red")
        raise typer.Exit(code=1)
    console.print(script, end="", markup=False, highlight=False, soft_wrap=True)


@app.command("run", hidden=True)
def run_task(
    task: str = typer.Argument(..., help="Task name or any word for a direct prompt"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log request details to stderr"
    ),
):
    """Run an interactive chat session for TASK."""
    set_debug(verbose)
    store = ConfigStore()
    config = _load_runtime_config(store)
    settings = ChatSettings()

    async def _run():
        llm = create_llm_provider(
            "openai",
            api_key=config.key,
            model=config.model,
            url=config.url,
            settings=settings,
        )
        async with llm:
            reader = LineReader(sys.stdin.readline, notice=_hint)
            session = ChatSession(llm, reader, settings=settings, out=console, err=err_console)
            await session.run(task)

    try:
        asyncio.run(_run())
    except NoInputError as e:
        _say(str(e))
        raise typer.Exit(code=1)
    except AskGPTError as e:
        raise _fail(str(e))
    except KeyboardInterrupt:
        _say("\nGoodbye!")
        raise typer.Exit(code=130)


# Subcommands handled by Typer itself; any other first word is a task.
SUBCOMMANDS = {"show-config", "set-url", "set-model", "set-key", "completion", "run"}
RUN_OPTIONS = {"-v", "--verbose"}


def route_args(args: list[str]) -> list[str]:
    """Map ``askgpt <task> ...`` onto the hidden ``run`` command.

    Run options may come before the task: ``askgpt -v chat`` is ``run chat -v``.
    """
    if len(args) > 1 and args[0] in RUN_OPTIONS:
        rest = route_args(args[1:])
        if rest[:1] == ["run"]:
            return [*rest, args[0]]
        return args
    if not args or args[0].startswith("-") or args[0] in SUBCOMMANDS:
        return args
    if args[0] == "help":
        return ["--help"]
    return ["run", *args]


def main():
    """Main entry point for the CLI."""
    args = route_args(sys.argv[1:])
    if not args or args[0] in ("-h", "--help"):
        _say(BANNER.strip("\n"))
    app(args=args, prog_name="askgpt")


if __name__ == "__main__":
    main()
