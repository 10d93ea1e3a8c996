"""Shell completion scripts for the askgpt command."""

from ..prompts import TASKS

# Command name -> description, in the order shown to the user.
COMMANDS: dict[str, str] = {
    "show-config": "Show current configuration",
    "set-url": "Set OpenAI API URL",
    "set-model": "Set OpenAI Model",
    "set-key": "Set OpenAI API Key",
    **TASKS,
    "completion": "Generate completion script",
}

SUPPORTED_SHELLS = ("bash", "zsh", "fish")


def _bash(prog: str) -> str:
    opts = " ".join(COMMANDS)
    return (
        f"_{prog}_completion() {{\n"
        "    local cur\n"
        "    COMPREPLY=()\n"
        '    cur="${COMP_WORDS[COMP_CWORD]}"\n'
        f'    opts="{opts}"\n'
        "\n"
        "    if [[ ${COMP_CWORD} -eq 1 ]]; then\n"
        '        COMPREPLY=( $(compgen -W "${opts}" -- ${cur}) )\n'
        "        return 0\n"
        "    fi\n"
        "}\n"
        f"complete -F _{prog}_completion {prog}\n"
    )


def _zsh(prog: str) -> str:
    entries = "\n".join(f"        '{name}:{desc}'" for name, desc in COMMANDS.items())
    return (
        f"#compdef {prog}\n"
        "\n"
        f"_{prog}() {{\n"
        "    local -a commands\n"
        "    commands=(\n"
        f"{entries}\n"
        "    )\n"
        "    _describe -t commands 'commands' commands\n"
        "}\n"
        "\n"
        f"_{prog}\n"
    )


def _fish(prog: str) -> str:
    names = " ".join(COMMANDS)
    lines = [f"set -l commands {names}", f"complete -c {prog} -f"]
    for name, desc in COMMANDS.items():
        lines.append(
            f'complete -c {prog} -n "not __fish_seen_subcommand_from $commands" '
            f'-a "{name}" -d "{desc}"'
        )
    return "\n".join(lines) + "\n"


def completion_script(shell: str, prog: str = "askgpt") -> str:
    """Return the completion script for ``shell``.

    Raises:
        ValueError: If the shell is not supported
    """
    if shell == "bash":
        return _bash(prog)
    if shell == "zsh":
        return _zsh(prog)
    if shell == "fish":
        return _fish(prog)
    raise ValueError(
        f"Unsupported shell: {shell}. Supported: {', '.join(SUPPORTED_SHELLS)}"
    )
