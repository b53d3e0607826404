# src/isipython/engine.py
from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from .keywords import KeywordTable, DEFAULT_TABLE
from .models import Diagnostic, Dominance, Position, Suggestion, TranslationResult
from .translator import Translator
from .tokenizer import Tokenizer, Token, LanguageConfiguration, LANGUAGE_CONFIGURATION
from .validator import Validator
from .completion import CompletionProvider

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - the keyword table (built once, shared read-only),
      - translation both ways (Translator),
      - display tokens (Tokenizer),
      - diagnostics (Validator),
      - completions (CompletionProvider).

    Public API (used by the editor session, Flask and the CLI):
      * translate_forward / translate_reverse / auto_translate
      * translate_lines / translate_lines_reverse
      * detect_dominant
      * tokenize(text)
      * validate(text)
      * complete(text, position)

    Every call is a pure function of its input; one Engine can be shared.
    """

    # ------------- lifecycle -------------

    def __init__(self, table: KeywordTable = DEFAULT_TABLE, *,
                 language_configuration: LanguageConfiguration = LANGUAGE_CONFIGURATION) -> None:
        self.table = table
        self.tokenizer = Tokenizer(table)
        self.translator = Translator(table)
        self.validator = Validator(table, self.tokenizer)
        self.completions = CompletionProvider(table, self.tokenizer)
        self.language_configuration = language_configuration
        log.info("Engine ready: %d keywords", len(table))

    # ------------- translation -------------

    def translate_forward(self, text: Optional[str]) -> str:
        return self.translator.translate_forward(text)

    def translate_reverse(self, text: Optional[str]) -> str:
        return self.translator.translate_reverse(text)

    def auto_translate(self, text: Optional[str]) -> TranslationResult:
        return self.translator.auto_translate(text)

    def detect_dominant(self, text: Optional[str]) -> Dominance:
        return self.translator.detect_dominant(text)

    def translate_lines(self, lines: Iterable[Optional[str]]) -> list[str]:
        return self.translator.translate_lines(lines)

    def translate_lines_reverse(self, lines: Iterable[Optional[str]]) -> list[str]:
        return self.translator.translate_lines_reverse(lines)

    # ------------- editor services -------------

    def tokenize(self, text: Optional[str]) -> list[Token]:
        return self.tokenizer.tokenize(text)

    def validate(self, text: Optional[str]) -> list[Diagnostic]:
        return self.validator.validate(text)

    def complete(self, text: Optional[str],
                 position: Optional[Union[Position, tuple]] = None) -> list[Suggestion]:
        return self.completions.provide_completions(text, position)

    def keywords(self) -> list[dict]:
        """The table as rows, for listings (CLI --keywords, /api/keywords)."""
        return [
            {"isipython": e.surface, "python": e.target, "meaning": e.meaning, "category": e.category}
            for e in self.table
        ]
