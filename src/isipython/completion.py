# src/isipython/completion.py
from __future__ import annotations
import logging
import re
from typing import Optional, Union

from . import config as CFG
from .keywords import KeywordTable, DEFAULT_TABLE
from .models import Position, Suggestion, SuggestionKind
from .tokenizer import Tokenizer, TokenKind, State

log = logging.getLogger(__name__)

# Python built-ins that pass through translation unchanged
BUILTINS: tuple[tuple[str, str, str], ...] = (
    ("print", "print(${1:umlayezo})", "print - show a message on the screen"),
    ("input", "input(${1:prompt})", "input - read a line typed by the user"),
    ("len", "len(${1:obj})", "len - number of items"),
    ("range", "range(${1:stop})", "range - a sequence of numbers"),
    ("int", "int(${1:value})", "int - convert to a whole number"),
    ("float", "float(${1:value})", "float - convert to a decimal number"),
    ("str", "str(${1:value})", "str - convert to text"),
    ("list", "list(${1:iterable})", "list - build a list"),
    ("dict", "dict($0)", "dict - build a dictionary"),
)

_WORD_BEFORE = re.compile(r"[^\W\d]\w*$")


class CompletionProvider:
    """
    Context-sensitive suggestions for an isiPython buffer.

    Merges a fixed catalogue (every surface keyword, plus a few built-ins)
    with identifiers scanned from the whole buffer on each request. On a
    label collision the buffer's identifier wins. Nothing is cached.
    """

    def __init__(self, table: KeywordTable = DEFAULT_TABLE, tokenizer: Optional[Tokenizer] = None,
                 *, max_suggestions: int = CFG.MAX_SUGGESTIONS) -> None:
        self.table = table
        self.tokenizer = tokenizer or Tokenizer(table)
        self.max_suggestions = max_suggestions
        self._static = self._build_static()

        def_kw = re.escape(table.surface_for("def") or "def")
        class_kw = re.escape(table.surface_for("class") or "class")
        self._function_re = re.compile(rf"\b{def_kw}\s+([^\W\d]\w*)\s*\(")
        self._class_re = re.compile(rf"^\s*{class_kw}\s+([^\W\d]\w*)")
        self._variable_re = re.compile(r"^\s*([^\W\d]\w*)\s*=(?!=)")

    # ------------- catalogue -------------

    def _build_static(self) -> list[Suggestion]:
        items: list[Suggestion] = []
        for e in self.table:
            items.append(Suggestion(
                label=e.surface,
                kind=SuggestionKind.KEYWORD,
                insert_text=e.snippet or e.surface,
                detail=f'{e.target} - means "{e.meaning}"',
                priority=CFG.PRIORITY_KEYWORD,
            ))
        for name, snippet, detail in BUILTINS:
            items.append(Suggestion(name, SuggestionKind.FUNCTION, snippet, detail, CFG.PRIORITY_BUILTIN))
        return items

    @property
    def static_suggestions(self) -> list[Suggestion]:
        return list(self._static)

    # ------------- buffer scan -------------

    def extract_user_definitions(self, text: Optional[str]) -> list[Suggestion]:
        """Functions, classes and variables declared in the buffer; first occurrence wins."""
        seen: set[str] = set()
        out: list[Suggestion] = []

        def add(label: str, kind: SuggestionKind, insert: str, detail: str) -> None:
            if label in seen or self.table.is_reserved(label):
                return
            seen.add(label)
            out.append(Suggestion(label, kind, insert, detail, CFG.PRIORITY_DYNAMIC, dynamic=True))

        for line in (text or "").split("\n"):
            m = self._function_re.search(line)
            if m:
                add(m.group(1), SuggestionKind.FUNCTION, f"{m.group(1)}($0)", "user-defined function")
            m = self._class_re.match(line)
            if m:
                add(m.group(1), SuggestionKind.CLASS, m.group(1), "user-defined class")
            m = self._variable_re.match(line)
            if m:
                add(m.group(1), SuggestionKind.VARIABLE, m.group(1), "user-defined variable")
        return out

    # ------------- context -------------

    def _context(self, text: str, position: Optional[Union[Position, tuple]]) -> tuple[str, bool]:
        """
        Return (prefix typed left of the cursor, cursor is inside a string/comment).
        Out-of-range positions are clamped to the buffer.
        """
        lines = text.split("\n")
        if position is None:
            line_no, col = len(lines), len(lines[-1]) + 1
        else:
            line_no, col = (position.line, position.column) if isinstance(position, Position) else position
        line_no = min(max(int(line_no), 1), len(lines))
        line = lines[line_no - 1].rstrip("\r")
        col = min(max(int(col), 1), len(line) + 1)
        before = line[: col - 1]

        state = State.ROOT
        for prev in lines[: line_no - 1]:
            _, state = self.tokenizer.tokenize_line(prev.rstrip("\r"), state)
        tokens, end_state = self.tokenizer.tokenize_line(before, state, line_no)
        in_text = end_state is not State.ROOT or bool(
            tokens and tokens[-1].kind in (TokenKind.COMMENT, TokenKind.STRING_INVALID)
        )
        m = _WORD_BEFORE.search(before)
        return (m.group(0) if m else ""), in_text

    # ------------- public -------------

    def provide_completions(self, text: Optional[str],
                            position: Optional[Union[Position, tuple]] = None) -> list[Suggestion]:
        text = text or ""
        prefix, in_text = self._context(text, position)
        if in_text:
            return []

        dynamic = self.extract_user_definitions(text)
        taken = {s.label for s in dynamic}
        merged = dynamic + [s for s in self._static if s.label not in taken]

        if prefix:
            p = prefix.casefold()
            merged = [s for s in merged if s.label.casefold().startswith(p)]

        merged.sort(key=lambda s: (-s.priority, s.label.casefold(), s.label))
        log.debug("completions: prefix=%r dynamic=%d total=%d", prefix, len(dynamic), len(merged))
        return merged[: self.max_suggestions]
