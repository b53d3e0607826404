# src/isipython/models.py
"""
Data models for the isiPython language bridge.

This module defines the small, focused result containers handed back to
callers (editor hosts, the web API, the CLI):

- TranslationResult: output of auto_translate() plus the detected direction.
- Diagnostic: one positioned, severity-tagged advisory about a source line.
- Suggestion: one completion item, static (keyword catalogue) or dynamic
  (scanned from the live buffer).
- Position: a 1-based (line, column) cursor location, as host editors report it.

These classes do not contain business logic; they only structure the data.
Every result is produced fresh per call and is immutable.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Language(str, Enum):
    ISIPYTHON = "isipython"   # surface: isiXhosa keywords
    PYTHON = "python"         # target: what the remote interpreter runs
    UNKNOWN = "unknown"
    NONE = "none"


class Dominance(str, Enum):
    """Which keyword sets a text contains."""
    SURFACE = "surface"
    TARGET = "target"
    BOTH = "both"
    NEITHER = "neither"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class SuggestionKind(str, Enum):
    KEYWORD = "keyword"
    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    SNIPPET = "snippet"


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """
    Attributes
    ----------
    translated_code : str
        The text after substitution (or the input verbatim when no keyword
        of either language was found).
    source_language : Language
        ISIPYTHON, PYTHON or UNKNOWN.
    target_language : Language
        PYTHON, ISIPYTHON or NONE.
    """
    translated_code: str
    source_language: Language
    target_language: Language

    def to_dict(self) -> dict:
        return {
            "translatedCode": self.translated_code,
            "sourceLanguage": self.source_language.value,
            "targetLanguage": self.target_language.value,
        }


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    A positioned advisory message about one line of source text.

    Attributes
    ----------
    line : int
        1-based line number.
    column : int
        1-based start column.
    end_column : int
        Exclusive end column; always >= column.
    message : str
        Human-friendly message, e.g. "Expected ':' after condition".
    severity : Severity
    code : str
        Stable rule identifier (E101...), usable for filtering.
    source : str
        Marker owner shown by host editors.
    """
    line: int
    column: int
    end_column: int
    message: str
    severity: Severity = Severity.ERROR
    code: str = ""
    source: str = "isipython"

    def format(self) -> str:
        return f"[{self.code}] line {self.line}, col {self.column}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "column": self.column,
            "endColumn": self.end_column,
            "message": self.message,
            "severity": self.severity.value,
            "code": self.code,
            "source": self.source,
        }


@dataclass(frozen=True, slots=True)
class Suggestion:
    """
    One completion item.

    insert_text may embed tab-stop placeholders (``${1:condition}``, ``$0``)
    that the host editor expands as a snippet. Higher priority sorts first.
    """
    label: str
    kind: SuggestionKind
    insert_text: str
    detail: str
    priority: int
    dynamic: bool = False

    @property
    def is_snippet(self) -> bool:
        return "$" in self.insert_text

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "kind": self.kind.value,
            "insertText": self.insert_text,
            "detail": self.detail,
            "priority": self.priority,
            "isSnippet": self.is_snippet,
        }


@dataclass(frozen=True, slots=True)
class Position:
    line: int     # 1-based
    column: int   # 1-based; column 1 is before the first character
