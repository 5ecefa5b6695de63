"""
Command Models for the adventure engine.

The engine's external contract: a tokenized Command goes in, a
CommandResponse comes out. Raw text parsing happens elsewhere.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Command(BaseModel):
    """A player command already split into parts by a tokenizer."""

    verb: str = Field(min_length=1, description="Canonical verb, e.g. 'take', 'go'")
    object: str | None = Field(default=None, description="Direct object name or id")
    target: str | None = Field(default=None, description="Indirect object name or id")
    preposition: str | None = Field(default=None, description="'in', 'on', 'with', ...")
    original_input: str = Field(default="", description="Raw player input, if known")

    def __str__(self) -> str:
        parts = [self.verb]
        if self.object:
            parts.append(self.object)
        if self.preposition:
            parts.append(self.preposition)
        if self.target:
            parts.append(self.target)
        return " ".join(parts)


class CommandResponse(BaseModel):
    """Result of executing a command."""

    success: bool
    message: str
    increment_turn: bool = Field(
        default=False, description="Whether this command consumed a game turn"
    )

    @classmethod
    def ok(cls, message: str, increment_turn: bool = True) -> CommandResponse:
        return cls(success=True, message=message, increment_turn=increment_turn)

    @classmethod
    def fail(cls, message: str) -> CommandResponse:
        """Player-facing failure: never consumes a turn."""
        return cls(success=False, message=message, increment_turn=False)
