# src/isipython/validator.py
"""
Heuristic, line-local syntax checks for isiPython buffers.

validate() is stateless and recomputes the whole diagnostic list on every
call. Each rule looks at one line (the indentation rule also peeks at the
next code line); there is no parser. Parenthesis balance and indentation are
therefore only checked line by line: an expression or block that spans lines
is not followed.

Rules
-----
E101  ukuba / okanye_ukuba / ngokulandelelana line without a trailing ':'
E102  a bare enye / zama / ekugqibeleni / ngaphandle without ':'
E103  chaza name( ... without ':'
E104  ngexesha line without ':'
E105  '(' and ')' counts differ on the line
E106  block opener not followed by a deeper-indented line
E107  a Python reserved word used in isiPython source
E108  unterminated string literal
E109  iklasi / ngaphandle / nge statement without ':'

Missing-colon errors (E101-E104, E109) sit one column past the last
non-blank character of the code part, where the ':' should be typed; hosts
that clamp columns show them on the last character.

E106 is stricter than "the next line begins with indentation": the next
code line must be indented deeper than the opener itself, so a nested block
written at its parent's depth is flagged too.

All keyword names come from the injected KeywordTable via the Python word
they stand for, so the rules follow the table.
"""

from __future__ import annotations
import logging
import re
from typing import Iterable, Optional

from . import config as CFG
from .keywords import KeywordTable, DEFAULT_TABLE
from .models import Diagnostic, Severity
from .tokenizer import Tokenizer, Token, TokenKind, State

log = logging.getLogger(__name__)

_TRIPLE_STATES = (State.STRING_TRIPLE_DOUBLE, State.STRING_TRIPLE_SINGLE)


def _alternation(words: Iterable[str]) -> str:
    ordered = sorted((w for w in words if w), key=lambda w: (-len(w), w))
    return "|".join(re.escape(w) for w in ordered) or r"(?!x)x"


def _indent_width(line: str) -> int:
    expanded = line.expandtabs(CFG.INDENT_WIDTH)
    return len(expanded) - len(expanded.lstrip(" "))


class Validator:
    """Produces ordered Diagnostics from source text; never raises on text."""

    def __init__(self, table: KeywordTable = DEFAULT_TABLE, tokenizer: Optional[Tokenizer] = None) -> None:
        self.table = table
        self.tokenizer = tokenizer or Tokenizer(table)
        kw = table.surface_for

        self.else_kw = kw("else") or "else"
        self.def_kw = kw("def") or "def"

        # statement keyword followed by a condition / target
        self._condition_re = re.compile(rf"^(?:{_alternation([kw('if'), kw('elif'), kw('for')])})(?=\s|\()")
        self._while_re = re.compile(rf"^(?:{_alternation([kw('while')])})(?=\s|\()")
        self._def_re = re.compile(rf"^{re.escape(self.def_kw)}\s+[^\W\d]\w*\s*\(")
        self._statement_re = re.compile(
            rf"^(?:{_alternation([kw('class'), kw('except'), kw('with')])})(?=\s|\()"
        )
        self._bare_words = {w for w in (kw("else"), kw("try"), kw("finally"), kw("except")) if w}

        openers = [kw(t) for t in ("if", "elif", "else", "for", "while", "def", "class",
                                   "try", "except", "finally", "with")]
        self._block_re = re.compile(rf"^(?:{_alternation(openers)})\b.*:$")

    # ------------- public -------------

    def validate(self, source: Optional[str]) -> list[Diagnostic]:
        if source is None:
            return []
        if not isinstance(source, str):
            raise TypeError(f"expected str or None, got {type(source).__name__}")
        if not source.strip():
            return []

        lines = [ln.rstrip("\r") for ln in source.split("\n")]
        per_line: list[tuple[list[Token], bool]] = []
        state = State.ROOT
        for i, line in enumerate(lines, start=1):
            starts_in_string = state in _TRIPLE_STATES
            tokens, state = self.tokenizer.tokenize_line(line, state, i)
            per_line.append((tokens, starts_in_string))

        codes = [self._code_part(toks) for toks, _ in per_line]

        diags: list[Diagnostic] = []
        for idx, line in enumerate(lines):
            tokens, in_docstring = per_line[idx]
            code = codes[idx].strip()
            if not code:
                continue
            line_no = idx + 1

            if not in_docstring:
                diags.extend(self._colon_rules(code, codes[idx], line_no))
                diags.extend(self._indent_rule(code, idx, lines, codes, per_line))
            diags.extend(self._paren_rule(tokens, line_no))
            diags.extend(self._token_rules(tokens))

        diags.sort(key=lambda d: (d.line, d.column, d.code))
        log.debug("validate: %d lines, %d diagnostics", len(lines), len(diags))
        return diags

    # ------------- rules -------------

    @staticmethod
    def _code_part(tokens: list[Token]) -> str:
        """The line without its trailing comment."""
        return "".join(t.value for t in tokens if t.kind is not TokenKind.COMMENT)

    @staticmethod
    def _missing_colon(raw_code: str, line_no: int, message: str, code: str) -> Diagnostic:
        col = len(raw_code.rstrip()) + 1
        return Diagnostic(line_no, col, col + 1, message, Severity.ERROR, code)

    def _colon_rules(self, code: str, raw_code: str, line_no: int) -> list[Diagnostic]:
        if code.endswith(":"):
            return []
        out: list[Diagnostic] = []
        # 1. if / elif / for
        if self._condition_re.match(code):
            out.append(self._missing_colon(raw_code, line_no, "Expected ':' after condition", "E101"))
        # 2. bare else-like keyword
        if code in self._bare_words:
            out.append(self._missing_colon(raw_code, line_no, f"Expected ':' after '{code}'", "E102"))
        # 3. def
        if self._def_re.match(code):
            out.append(self._missing_colon(raw_code, line_no, "Expected ':' after function definition", "E103"))
        # 4. while
        if self._while_re.match(code):
            out.append(self._missing_colon(raw_code, line_no, "Expected ':' after while condition", "E104"))
        # class / except / with
        m = self._statement_re.match(code)
        if m:
            out.append(self._missing_colon(raw_code, line_no, f"Expected ':' after '{m.group(0)}' statement", "E109"))
        return out

    @staticmethod
    def _paren_rule(tokens: list[Token], line_no: int) -> list[Diagnostic]:
        opened = sum(1 for t in tokens if t.kind is TokenKind.BRACKET and t.value == "(")
        closed = sum(1 for t in tokens if t.kind is TokenKind.BRACKET and t.value == ")")
        if opened == closed:
            return []
        return [Diagnostic(line_no, 1, 2, "Unmatched parentheses", Severity.ERROR, "E105")]

    def _indent_rule(self, code: str, idx: int, lines: list[str], codes: list[str],
                     per_line: list[tuple[list[Token], bool]]) -> list[Diagnostic]:
        if not self._block_re.match(code):
            return []
        nxt = idx + 1
        # blank and comment-only lines do not count
        while nxt < len(lines) and not codes[nxt].strip():
            nxt += 1
        if nxt >= len(lines) or per_line[nxt][1]:
            return []
        if _indent_width(lines[nxt]) > _indent_width(lines[idx]):
            return []
        return [Diagnostic(nxt + 1, 1, 2, "Expected indented block", Severity.ERROR, "E106")]

    def _token_rules(self, tokens: list[Token]) -> list[Diagnostic]:
        out: list[Diagnostic] = []
        for t in tokens:
            if t.kind is TokenKind.IDENTIFIER and self.table.is_target(t.value):
                surface = self.table.surface_for(t.value)
                out.append(Diagnostic(
                    t.line, t.column, t.end_column,
                    f"Use '{surface}' instead of '{t.value}'", Severity.ERROR, "E107",
                ))
            elif t.kind is TokenKind.STRING_INVALID:
                out.append(Diagnostic(
                    t.line, t.column, t.end_column,
                    "Unterminated string literal", Severity.ERROR, "E108",
                ))
        return out
