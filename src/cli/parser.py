"""
Command Parser for the adventure engine.

Turns raw player text into a tokenized Command. Pattern matching covers
multi-word verbs ("turn on", "pick up", "look at"); everything else is a
synonym lookup on the first word followed by an optional preposition split.
"""

from __future__ import annotations

import re

from src.models.command import Command
from src.services.movement import DIRECTION_ALIASES

# Canonical verb -> accepted synonyms
VERB_SYNONYMS: dict[str, list[str]] = {
    "look": ["l"],
    "examine": ["x", "inspect", "check", "describe"],
    "inventory": ["i", "inv"],
    "take": ["get", "grab", "pick", "collect"],
    "drop": ["discard", "place"],
    "close": ["shut"],
    "read": ["peruse"],
    "go": ["walk", "run", "head", "travel"],
    "score": [],
    "put": ["insert", "stash"],
    "open": [],
    "unlock": [],
    "lock": [],
    "move": ["push", "pull", "shift"],
    "enter": [],
    "climb": [],
}

_SYNONYM_LOOKUP: dict[str, str] = {
    synonym: verb for verb, synonyms in VERB_SYNONYMS.items() for synonym in (verb, *synonyms)
}

DIRECTIONS = frozenset({*DIRECTION_ALIASES, *DIRECTION_ALIASES.values()})

PREPOSITIONS = ("in", "into", "inside", "on", "onto", "with", "at", "to", "from")

ARTICLES = frozenset({"the", "a", "an", "some"})

# Multi-word verb forms, checked before the first-word lookup
VERB_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"^(?:turn|switch)\s+on\s+(?P<object>.+)$", re.I), "turn_on"),
    (re.compile(r"^(?:turn|switch)\s+(?P<object>.+?)\s+on$", re.I), "turn_on"),
    (re.compile(r"^(?:turn|switch)\s+off\s+(?P<object>.+)$", re.I), "turn_off"),
    (re.compile(r"^(?:turn|switch)\s+(?P<object>.+?)\s+off$", re.I), "turn_off"),
    (re.compile(r"^(?:light|ignite)\s+(?P<object>.+)$", re.I), "turn_on"),
    (re.compile(r"^(?:extinguish|douse)\s+(?P<object>.+)$", re.I), "turn_off"),
    (re.compile(r"^pick\s+up\s+(?P<object>.+)$", re.I), "take"),
    (re.compile(r"^pick\s+(?P<object>.+?)\s+up$", re.I), "take"),
    (re.compile(r"^put\s+down\s+(?P<object>.+)$", re.I), "drop"),
    (re.compile(r"^look\s+(?:at|in|inside|into)\s+(?P<object>.+)$", re.I), "examine"),
    (re.compile(r"^climb\s+(?:through|in|into)\s+(?P<object>.+)$", re.I), "enter"),
    (re.compile(r"^go\s+(?:in|into|through)\s+(?P<object>.+)$", re.I), "enter"),
]

_WORD_PATTERN = re.compile(r"[a-z0-9'-]+")


def tokenize(text: str) -> list[str]:
    """Lowercase words with punctuation removed."""
    return _WORD_PATTERN.findall(text.lower())


def strip_articles(words: list[str]) -> list[str]:
    return [w for w in words if w not in ARTICLES]


def canonical_verb(word: str) -> str:
    """Map a verb synonym to its canonical form (unknown verbs pass through)."""
    return _SYNONYM_LOOKUP.get(word.lower(), word.lower())


class CommandParser:
    """
    Rule-based parser from player text to Command.

    Unknown verbs are passed through unchanged, so authored interactions
    like "prime pump" or "climb tree" reach the engine without any parser
    changes.
    """

    def parse(self, player_input: str) -> Command | None:
        """
        Parse one line of player input.

        Args:
            player_input: Raw text typed by the player

        Returns:
            The Command, or None for blank input
        """
        raw = player_input.strip()
        words = tokenize(raw)
        if not words:
            return None

        normalized = " ".join(words)
        for pattern, verb in VERB_PATTERNS:
            match = pattern.match(normalized)
            if match:
                return Command(
                    verb=verb,
                    object=self._phrase(match.group("object").split()),
                    original_input=raw,
                )

        first, rest = words[0], words[1:]

        if first in DIRECTIONS and not rest:
            return Command(verb="go", object=DIRECTION_ALIASES.get(first, first), original_input=raw)

        verb = canonical_verb(first)
        if verb == "look" and rest == ["around"]:
            rest = []
        if verb == "go" and rest:
            if rest[0] in ("to", "towards"):
                rest = rest[1:]
            if len(rest) == 1 and rest[0] in DIRECTION_ALIASES:
                rest = [DIRECTION_ALIASES[rest[0]]]
        if verb == "put" and rest and not any(w in PREPOSITIONS for w in rest):
            verb = "drop"

        obj, preposition, target = self._split(rest)
        return Command(
            verb=verb,
            object=obj,
            preposition=preposition,
            target=target,
            original_input=raw,
        )

    def _split(self, words: list[str]) -> tuple[str | None, str | None, str | None]:
        """Split "X in Y" into object, preposition and target."""
        for index, word in enumerate(words):
            if index > 0 and word in PREPOSITIONS:
                return (
                    self._phrase(words[:index]),
                    self._preposition(word),
                    self._phrase(words[index + 1 :]),
                )
        return self._phrase(words), None, None

    @staticmethod
    def _preposition(word: str) -> str:
        if word in ("into", "inside"):
            return "in"
        if word == "onto":
            return "on"
        return word

    @staticmethod
    def _phrase(words: list[str]) -> str | None:
        phrase = " ".join(strip_articles(words))
        return phrase or None
