"""Interactive REPL: prompt_toolkit session mixing AI questions and shell commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory
from prompt_toolkit.shortcuts import CompleteStyle

from kakashell.cli.completer import SHELL_PREFIX, KakaCompleter
from kakashell.cli.main import KakaContext
from kakashell.core.config import get_history_path
from kakashell.core.exceptions import KakaShellError

logger = logging.getLogger(__name__)

CHAT_PROMPT = "kaka-ai> "
COMMAND_PROMPT = "$ "


class ShellHistory(FileHistory):
    """File history that skips blank lines, comments and space-prefixed lines."""

    def append_string(self, string: str) -> None:
        if not string.strip() or string.startswith(" ") or string.lstrip().startswith("#"):
            return
        super().append_string(string)


@dataclass
class ReplState:
    """Mutable state of one REPL session."""

    command_mode: bool = False
    command_history: list[str] = field(default_factory=list)

    @property
    def prompt(self) -> str:
        return COMMAND_PROMPT if self.command_mode else CHAT_PROMPT


def _run_command(ctx: KakaContext, command: str, record: bool) -> None:
    try:
        output = ctx.commands.execute(command)
    except KakaShellError as e:
        ctx.formatter.error(f"Error executing command: {e}")
        return
    if output:
        ctx.formatter.output(output)
    if record:
        ctx.get_chat().add_recent_interaction(f"Command: {command}\nOutput: {output}")


def _ask(ctx: KakaContext, question: str) -> None:
    chat = ctx.get_chat()
    try:
        with ctx.formatter.status("Thinking..."):
            response = chat.ask(question)
    except KakaShellError as e:
        ctx.formatter.error(f"Error getting AI response: {e}")
        return
    ctx.formatter.output(f"kaka-AI: {response}")
    chat.update_context(question, response)
    chat.add_recent_interaction(f"User: {question}\nAI: {response}")


def handle_line(ctx: KakaContext, state: ReplState, raw: str) -> bool:
    """Process one input line. Returns False when the session should end."""
    line = raw.strip()
    if line.lower() == "exit":
        return False
    if not line:
        return True

    if not line.startswith("#"):
        state.command_history.append(line)

    if line == SHELL_PREFIX:
        state.command_mode = True
        ctx.formatter.info("Entered Linux command mode. Type 'quit' to exit.")
        return True

    if state.command_mode:
        if line == "quit":
            state.command_mode = False
            ctx.formatter.info("Exited Linux command mode.")
        else:
            _run_command(ctx, line, record=False)
        return True

    if line.lower() == "reset":
        ctx.get_chat().reset()
        ctx.formatter.success("Context and recent interactions have been reset.")
        return True

    if line.startswith("#"):
        return True

    if line.startswith(SHELL_PREFIX):
        _run_command(ctx, line[len(SHELL_PREFIX):].strip(), record=True)
    else:
        _ask(ctx, line)
    return True


def launch_repl(ctx: KakaContext) -> None:
    """Launch the interactive REPL session."""
    ctx.formatter.panel(
        "[bold yellow]KakaShell[/bold yellow]: AI-assisted Linux shell\n"
        "Ask anything, prefix a command with [bold]![/bold] to run it, "
        "or type [bold]![/bold] alone for command mode.\n"
        "[bold]reset[/bold] clears the conversation, [bold]exit[/bold] quits.",
    )

    state = ReplState()
    completer = KakaCompleter(ctx.get_engine(), command_mode=lambda: state.command_mode)
    session: PromptSession[str] = PromptSession(
        completer=completer,
        history=ShellHistory(str(get_history_path())),
        complete_style=CompleteStyle.READLINE_LIKE,
        complete_while_typing=False,
    )

    while True:
        try:
            text = session.prompt(FormattedText([("ansiyellow", state.prompt)]))
        except KeyboardInterrupt:
            ctx.formatter.print("CTRL-C")
            break
        except EOFError:
            ctx.formatter.print("CTRL-D")
            break

        if not handle_line(ctx, state, text):
            break

    logger.info("session ended after %d entries", len(state.command_history))
