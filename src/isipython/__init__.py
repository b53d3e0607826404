"""
isiPython language bridge

Lets students write Python with isiXhosa keywords. The package provides the
pieces a code editor needs around that surface syntax:

- a fixed, one-to-one keyword table (isiPython <-> Python)
- word-boundary-safe keyword translation in both directions, with language
  detection
- a display tokenizer, theme and language configuration
- heuristic line-local diagnostics
- completions from the keyword catalogue and from the live buffer
- a debounced editor session tying it all to one buffer

Example Usage:
    from isipython import translate_forward, validate, provide_completions

    translate_forward("ukuba x > 5:\\n    buyisela Inyaniso")
    # 'if x > 5:\\n    return True'

    for d in validate("ukuba x > 5"):
        print(d.format())        # [E101] line 1, col 12: Expected ':' after condition

    provide_completions("chaza add(a, b):\\n    buyisela a + b\\n", (3, 1))[0].label
    # 'add'

Translation is text-level: keyword look-alikes inside strings and comments
are rewritten too. The translated text is what gets sent for execution.
"""

# src/isipython/__init__.py
from __future__ import annotations
from typing import Optional, Union

from .engine import Engine
from .models import (
    Diagnostic, Dominance, Language, Position, Severity, Suggestion, SuggestionKind, TranslationResult,
)
from .keywords import DEFAULT_TABLE, KeywordEntry, KeywordTable
from .tokenizer import Token, TokenKind

__version__ = "1.0.0"

_engine: Engine | None = None


def get_engine() -> Engine:
    """The shared default Engine, built on first use."""
    global _engine
    if _engine is None:
        _engine = Engine(DEFAULT_TABLE)
    return _engine


def translate_forward(text: Optional[str]) -> str:
    return get_engine().translate_forward(text)


def translate_reverse(text: Optional[str]) -> str:
    return get_engine().translate_reverse(text)


def auto_translate(text: Optional[str]) -> TranslationResult:
    return get_engine().auto_translate(text)


def detect_dominant(text: Optional[str]) -> Dominance:
    return get_engine().detect_dominant(text)


def translate_lines(lines: list[str]) -> list[str]:
    return get_engine().translate_lines(lines)


def translate_lines_reverse(lines: list[str]) -> list[str]:
    return get_engine().translate_lines_reverse(lines)


def tokenize(text: Optional[str]) -> list[Token]:
    return get_engine().tokenize(text)


def validate(text: Optional[str]) -> list[Diagnostic]:
    return get_engine().validate(text)


def provide_completions(text: Optional[str],
                        position: Optional[Union[Position, tuple]] = None) -> list[Suggestion]:
    return get_engine().complete(text, position)


__all__ = [
    "Engine", "get_engine",
    "translate_forward", "translate_reverse", "auto_translate", "detect_dominant",
    "translate_lines", "translate_lines_reverse",
    "tokenize", "validate", "provide_completions",
    "Diagnostic", "Dominance", "Language", "Position", "Severity", "Suggestion", "SuggestionKind",
    "TranslationResult", "KeywordEntry", "KeywordTable", "DEFAULT_TABLE", "Token", "TokenKind",
]
