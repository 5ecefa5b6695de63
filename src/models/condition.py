"""
Condition Expressions for the adventure engine.

Authored content gates interactions, exits and description overrides with
lists of flag clauses. Those lists are parsed once, at load time, into a
small expression tree (Atom, Not, And, Or) that is evaluated against the
flag set on every read.

Authoring format:
    ["mailboxOpen", "!hasLeaflet"]     both must hold
    ["mailboxOpen|hasLeaflet"]          either may hold
    "mailboxOpen,!mailboxEmpty"         comma-joined shorthand for a list
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from src.models.flags import FlagKey, flag_name

FlagLookup = Callable[[str], bool]


# =============================================================================
# Expression Nodes
# =============================================================================


class Atom(BaseModel):
    """A single flag that must be set."""

    model_config = {"frozen": True}

    kind: Literal["atom"] = "atom"
    flag: str = Field(min_length=1)

    def evaluate(self, lookup: FlagLookup) -> bool:
        return lookup(self.flag)

    def flags(self) -> set[str]:
        return {self.flag}

    def __str__(self) -> str:
        return self.flag


class Not(BaseModel):
    """Negation of a sub-expression."""

    model_config = {"frozen": True}

    kind: Literal["not"] = "not"
    operand: Expr

    def evaluate(self, lookup: FlagLookup) -> bool:
        return not self.operand.evaluate(lookup)

    def flags(self) -> set[str]:
        return self.operand.flags()

    def __str__(self) -> str:
        return f"!{self.operand}"


class And(BaseModel):
    """Conjunction. An empty conjunction is always true."""

    model_config = {"frozen": True}

    kind: Literal["and"] = "and"
    operands: tuple[Expr, ...] = ()

    def evaluate(self, lookup: FlagLookup) -> bool:
        return all(op.evaluate(lookup) for op in self.operands)

    def flags(self) -> set[str]:
        names: set[str] = set()
        for op in self.operands:
            names |= op.flags()
        return names

    def __str__(self) -> str:
        return ",".join(str(op) for op in self.operands)


class Or(BaseModel):
    """Disjunction. An empty disjunction is always false."""

    model_config = {"frozen": True}

    kind: Literal["or"] = "or"
    operands: tuple[Expr, ...] = ()

    def evaluate(self, lookup: FlagLookup) -> bool:
        return any(op.evaluate(lookup) for op in self.operands)

    def flags(self) -> set[str]:
        names: set[str] = set()
        for op in self.operands:
            names |= op.flags()
        return names

    def __str__(self) -> str:
        return "|".join(str(op) for op in self.operands)


Expr = Annotated[Union[Atom, Not, And, Or], Field(discriminator="kind")]

Not.model_rebuild()
And.model_rebuild()
Or.model_rebuild()

ALWAYS = And()


# =============================================================================
# Parsing
# =============================================================================


def _parse_term(term: str) -> Atom | Not:
    term = term.strip()
    negated = term.startswith("!")
    name = term[1:].strip() if negated else term
    if not name:
        raise ValueError(f"Empty flag name in condition term: {term!r}")
    atom = Atom(flag=name)
    return Not(operand=atom) if negated else atom


def _parse_clause(clause: str | FlagKey) -> Atom | Not | Or:
    if isinstance(clause, FlagKey):
        return Atom(flag=clause.name)
    if "|" in clause:
        return Or(operands=tuple(_parse_term(t) for t in clause.split("|")))
    return _parse_term(clause)


def parse_condition(
    source: str | FlagKey | Iterable[str | FlagKey] | Atom | Not | And | Or | None,
) -> Atom | Not | And | Or:
    """
    Parse authored clauses into an expression tree.

    Args:
        source: A list of clauses, a single (optionally comma-joined) clause,
            a typed flag key, an already-parsed expression, or None.

    Returns:
        The parsed expression. None and empty input yield ``ALWAYS``.

    Raises:
        ValueError: If a clause contains an empty flag name.
    """
    if source is None:
        return ALWAYS
    if isinstance(source, (Atom, Not, And, Or)):
        return source
    if isinstance(source, FlagKey):
        return Atom(flag=source.name)
    if isinstance(source, str):
        clauses: list[str | FlagKey] = [c for c in source.split(",") if c.strip()]
    else:
        clauses = list(source)
    if not clauses:
        return ALWAYS
    return And(operands=tuple(_parse_clause(c) for c in clauses))


# =============================================================================
# Evaluation
# =============================================================================


def evaluate(expr: Atom | Not | And | Or, flags: set[str] | FlagLookup) -> bool:
    """
    Evaluate an expression against a flag set or lookup function.

    Unknown flags are false. Evaluation has no side effects.
    """
    if callable(flags):
        return expr.evaluate(flags)
    return expr.evaluate(lambda name: name in flags)


def all_of(*keys: FlagKey | str) -> And:
    """Build a conjunction of typed keys or raw names."""
    return And(operands=tuple(Atom(flag=flag_name(k)) for k in keys))


def none_of(*keys: FlagKey | str) -> And:
    """Build a conjunction requiring every key to be unset."""
    return And(operands=tuple(Not(operand=Atom(flag=flag_name(k))) for k in keys))
