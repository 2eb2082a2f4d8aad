"""Root CLI group: entry point for all KakaShell commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from kakashell import __version__
from kakashell.core.config import default_config, get_config_path, load_config, save_config
from kakashell.core.exceptions import KakaShellError
from kakashell.core.log import setup_logging
from kakashell.output.formatter import OutputFormatter
from kakashell.services.command_service import CommandService


class KakaContext:
    """Shared context passed through Click commands and the REPL."""

    def __init__(self, json_mode: bool = False, config_path: Path | None = None) -> None:
        self.json_mode = json_mode
        self.config_path = config_path
        self.formatter = OutputFormatter(json_mode=json_mode)
        self._config: dict[str, Any] | None = None
        self._chat = None
        self._engine = None
        self._commands: CommandService | None = None

    @property
    def config(self) -> dict[str, Any]:
        """Lazy-load the merged configuration."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def commands(self) -> CommandService:
        if self._commands is None:
            cd_command = self.config.get("completion", {}).get("cd_command", "cd")
            self._commands = CommandService(cd_command=cd_command)
        return self._commands

    def get_chat(self):
        """Lazy-create the chat service."""
        if self._chat is None:
            from kakashell.services.chat_service import ChatService

            self._chat = ChatService(self.config)
        return self._chat

    def get_engine(self):
        """Lazy-create the completion engine from the configured command table."""
        if self._engine is None:
            from kakashell.services.completion import CompletionEngine

            completion = self.config.get("completion", {})
            self._engine = CompletionEngine(
                commands=completion.get("commands", ()),
                cd_command=completion.get("cd_command", "cd"),
            )
        return self._engine


pass_context = click.make_pass_decorator(KakaContext, ensure=True)


@click.group(invoke_without_command=True)
@click.option("--json", "json_mode", is_flag=True, help="Output JSON for scripting.")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of ~/.config/kakashell/kaka.toml.",
)
@click.option("--debug", is_flag=True, help="Write DEBUG records to the log file.")
@click.version_option(__version__, prog_name="KakaShell")
@click.pass_context
def cli(ctx: click.Context, json_mode: bool, config_path: Path | None, debug: bool) -> None:
    """KakaShell: ask AI about Linux commands, or run them directly.

    Run without a subcommand to launch the interactive REPL.
    """
    setup_logging(debug=debug)
    ctx.obj = KakaContext(json_mode=json_mode, config_path=config_path)

    if ctx.invoked_subcommand is None:
        from kakashell.cli.repl import launch_repl

        try:
            launch_repl(ctx.obj)
        except KakaShellError as e:
            ctx.obj.formatter.error(str(e))
            sys.exit(1)


@cli.command()
@click.argument("question", nargs=-1, required=True)
@pass_context
def ask(ctx: KakaContext, question: tuple[str, ...]) -> None:
    """Ask a single question and print the answer."""
    text = " ".join(question)
    try:
        answer = ctx.get_chat().ask(text)
    except KakaShellError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    if ctx.json_mode:
        ctx.formatter.json({"question": text, "answer": answer})
    else:
        ctx.formatter.output(f"kaka-AI: {answer}")


@cli.command()
@click.argument("command", nargs=-1, required=True)
@pass_context
def run(ctx: KakaContext, command: tuple[str, ...]) -> None:
    """Run a shell command and print its output."""
    text = " ".join(command)
    try:
        output = ctx.commands.execute(text)
    except KakaShellError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    if ctx.json_mode:
        ctx.formatter.json({"command": text, "output": str(output)})
    elif output:
        ctx.formatter.output(output)


@cli.command()
@click.argument("line")
@click.option("--cursor", type=int, default=None, help="Cursor offset (default: end of line).")
@pass_context
def complete(ctx: KakaContext, line: str, cursor: int | None) -> None:
    """Show the tab completions for LINE."""
    if cursor is None:
        cursor = len(line)
    start, candidates = ctx.get_engine().complete(line, cursor)
    ctx.formatter.table(
        title=f"Completions from offset {start}",
        columns=[("Display", "cyan"), ("Replacement", "")],
        rows=[[c.display, c.replacement] for c in candidates],
        data_for_json={"start": start, "candidates": [c.model_dump() for c in candidates]},
    )


@cli.group()
def config() -> None:
    """Manage the configuration file."""


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@pass_context
def config_init(ctx: KakaContext, force: bool) -> None:
    """Write the default configuration."""
    path = ctx.config_path or get_config_path()
    if path.exists() and not force:
        ctx.formatter.warning(f"{path} already exists. Use --force to overwrite.")
        return
    try:
        save_config(default_config(), path)
    except KakaShellError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)
    ctx.formatter.success(f"Wrote {path}")


@config.command("show")
@pass_context
def config_show(ctx: KakaContext) -> None:
    """Print the merged configuration (API key masked)."""
    try:
        cfg = load_config(ctx.config_path)
    except KakaShellError as e:
        ctx.formatter.error(str(e))
        sys.exit(1)

    key = cfg["openai"].get("api_key", "")
    if key:
        cfg["openai"]["api_key"] = key[:4] + "…" if len(key) > 8 else "…"

    if ctx.json_mode:
        ctx.formatter.json(cfg)
        return
    rows = [
        [f"{section}.{name}", str(value)]
        for section, values in cfg.items()
        for name, value in values.items()
    ]
    ctx.formatter.table("Configuration", [("Key", "cyan"), ("Value", "")], rows)
