"""Completion candidate value object."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Candidate(BaseModel):
    """A possible replacement for the word under the cursor.

    ``display`` is what the menu shows; ``replacement`` is spliced into the
    line over the matched span.
    """

    model_config = ConfigDict(frozen=True)

    display: str
    replacement: str

    @classmethod
    def plain(cls, text: str) -> "Candidate":
        """Candidate whose display and replacement are the same text."""
        return cls(display=text, replacement=text)
