# src/isipython/translator.py
from __future__ import annotations
import logging
import re
from typing import Iterable, Mapping, Optional

from .keywords import KeywordTable, DEFAULT_TABLE
from .models import Dominance, Language, TranslationResult

log = logging.getLogger(__name__)


def _compile_keyword_pattern(words: Iterable[str]) -> re.Pattern:
    """
    /* ~~~ One alternation, longest key first, anchored on word boundaries.
       "okanye_ukuba" is tried before "okanye"; "my_ukuba_flag" never matches
       because "_" is a word character. ~~~ */
    """
    ordered = sorted(words, key=lambda w: (-len(w), w))
    if not ordered:
        return re.compile(r"(?!x)x")
    alt = "|".join(re.escape(w) for w in ordered)
    return re.compile(rf"\b(?:{alt})\b")


def _as_text(text: Optional[str]) -> str:
    if text is None:
        return ""
    if not isinstance(text, str):
        raise TypeError(f"expected str or None, got {type(text).__name__}")
    return text


class Translator:
    """
    Token-level keyword substitution between isiPython and Python.

    Text-level, not grammar-aware: keyword look-alikes inside string literals
    and comments are rewritten too.

    Empty, None and whitespace-only input translates to "" in both directions.
    """

    def __init__(self, table: KeywordTable = DEFAULT_TABLE) -> None:
        self.table = table
        self._surface_pat = _compile_keyword_pattern(table.forward)
        self._target_pat = _compile_keyword_pattern(table.reverse)

    # ------------- substitution -------------

    @staticmethod
    def _substitute(text: Optional[str], pat: re.Pattern, mapping: Mapping[str, str]) -> str:
        text = _as_text(text)
        if not text.strip():
            return ""
        return pat.sub(lambda m: mapping[m.group(0)], text)

    def translate_forward(self, text: Optional[str]) -> str:
        """isiPython -> Python."""
        return self._substitute(text, self._surface_pat, self.table.forward)

    def translate_reverse(self, text: Optional[str]) -> str:
        """Python -> isiPython."""
        return self._substitute(text, self._target_pat, self.table.reverse)

    def translate_lines(self, lines: Iterable[Optional[str]]) -> list[str]:
        return [self.translate_forward(line) for line in lines]

    def translate_lines_reverse(self, lines: Iterable[Optional[str]]) -> list[str]:
        return [self.translate_reverse(line) for line in lines]

    # ------------- detection -------------

    def contains_surface_keywords(self, text: Optional[str]) -> bool:
        return bool(self._surface_pat.search(_as_text(text)))

    def contains_target_keywords(self, text: Optional[str]) -> bool:
        return bool(self._target_pat.search(_as_text(text)))

    def detect_dominant(self, text: Optional[str]) -> Dominance:
        has_surface = self.contains_surface_keywords(text)
        has_target = self.contains_target_keywords(text)
        if has_surface and has_target:
            return Dominance.BOTH
        if has_surface:
            return Dominance.SURFACE
        if has_target:
            return Dominance.TARGET
        return Dominance.NEITHER

    def auto_translate(self, text: Optional[str]) -> TranslationResult:
        """
        Detect the language and translate to the other one.

        Mixed input (keywords of both languages) is translated forward: the
        editor's buffer is isiPython, so stray Python words are the exception.
        Input with neither keyword set comes back unchanged.
        """
        text = _as_text(text)
        if not text.strip():
            return TranslationResult("", Language.UNKNOWN, Language.NONE)

        dominance = self.detect_dominant(text)
        log.debug("auto_translate: detected %s", dominance.value)

        if dominance in (Dominance.SURFACE, Dominance.BOTH):
            return TranslationResult(self.translate_forward(text), Language.ISIPYTHON, Language.PYTHON)
        if dominance is Dominance.TARGET:
            return TranslationResult(self.translate_reverse(text), Language.PYTHON, Language.ISIPYTHON)
        return TranslationResult(text, Language.UNKNOWN, Language.NONE)
