"""Trigger detection against the live key buffer."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from hotstring.core.buffer import KeyBuffer
from hotstring.core.definition import Definition, Kind
from hotstring.core.registry import HotstringRegistry

_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9_]")


@dataclass(frozen=True, slots=True)
class LiteralMatch:
    definition: Definition
    end_char: str
    trigger_length: int
    end_char_length: int
    typed: str


@dataclass(frozen=True, slots=True)
class PatternMatch:
    definition: Definition
    match: re.Match[str]


def _same_text(typed: str, trigger: str, case_sensitive: bool) -> bool:
    if not typed or not trigger:
        return False
    if case_sensitive:
        return typed == trigger
    return typed.lower() == trigger.lower()


class Matcher:
    """Walks the registry in order and reports the first definition that fires."""

    def __init__(self, registry: HotstringRegistry, end_chars: Iterable[str]) -> None:
        self.registry = registry
        self.end_chars: frozenset[str] = frozenset(end_chars)

    def scan(
        self, buffer: KeyBuffer, last_char: str, suspended: bool = False
    ) -> LiteralMatch | PatternMatch | None:
        for definition in self.registry:
            if suspended and not definition.options.suspend_exempt:
                continue
            if definition.kind is Kind.PATTERN:
                if match := definition.trigger.search(buffer.text):
                    return PatternMatch(definition, match)
                continue
            if literal := self._match_literal(definition, buffer, last_char):
                return literal
        return None

    def _match_literal(
        self, definition: Definition, buffer: KeyBuffer, last_char: str
    ) -> LiteralMatch | None:
        options = definition.options
        trigger_length = len(definition.trigger)

        if options.fire_immediately:
            end_char = ""
        elif last_char and last_char in self.end_chars:
            end_char = last_char
        else:
            return None

        typed = buffer.tail(trigger_length, skip=len(end_char))
        if not _same_text(typed, definition.trigger, options.case_sensitive):
            return None
        if not options.inside_word and not self._at_word_start(buffer, trigger_length + len(end_char)):
            return None
        return LiteralMatch(
            definition=definition,
            end_char=end_char,
            trigger_length=trigger_length,
            end_char_length=len(end_char),
            typed=typed,
        )

    @staticmethod
    def _at_word_start(buffer: KeyBuffer, length: int) -> bool:
        before = buffer.char_before_tail(length)
        return before is None or not _WORD_CHAR_RE.match(before)
