"""prompt_toolkit completer backed by the KakaShell completion engine."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from kakashell.services.completion import CompletionEngine

SHELL_PREFIX = "!"


class KakaCompleter(Completer):
    """Completes shell input; chat questions get no completions.

    In command mode the whole line is shell input. In chat mode only a line
    starting with ``!`` is, and the prefix is hidden from the engine.
    """

    def __init__(
        self,
        engine: CompletionEngine,
        command_mode: Callable[[], bool] = lambda: False,
    ) -> None:
        self._engine = engine
        self._command_mode = command_mode

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        text = document.text
        cursor = document.cursor_position

        offset = 0
        if not self._command_mode():
            if not text.startswith(SHELL_PREFIX) or cursor < len(SHELL_PREFIX):
                return
            offset = len(SHELL_PREFIX)

        start, candidates = self._engine.complete(text[offset:], cursor - offset)
        for candidate in candidates:
            yield Completion(
                candidate.replacement,
                start_position=start + offset - cursor,
                display=candidate.display,
            )
