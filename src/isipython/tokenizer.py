# src/isipython/tokenizer.py
"""
Display tokenizer for isiPython.

A small declarative state machine in the style of an editor grammar: each
state owns an ordered list of rules (pattern, token kind, state action) and
the first rule that matches at the cursor wins. Token kinds only drive
presentation; nothing in the translator depends on them.

States
------
ROOT                  keywords, numbers, strings, comments, brackets,
                      operators, whitespace, identifiers
STRING_DOUBLE/SINGLE  body of a one-line string; ends at the matching quote
STRING_TRIPLE_*       body of a triple-quoted string; survives line breaks
WHITESPACE            blanks and comments, included into ROOT

Malformed input never raises: an unterminated one-line string becomes a
STRING_INVALID token to the end of the line, and any character no rule
accepts becomes a one-character INVALID token.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from .keywords import KeywordTable, DEFAULT_TABLE


class TokenKind(str, Enum):
    KEYWORD = "keyword"
    NUMBER_FLOAT = "number.float"
    NUMBER = "number"
    STRING = "string"
    STRING_ESCAPE = "string.escape"
    STRING_INVALID = "string.invalid"
    COMMENT = "comment"
    OPERATOR = "operator"
    BRACKET = "delimiter.bracket"
    IDENTIFIER = "identifier"
    WHITESPACE = "white"
    INVALID = "invalid"


class State(str, Enum):
    ROOT = "root"
    STRING_DOUBLE = "string_double"
    STRING_SINGLE = "string_single"
    STRING_TRIPLE_DOUBLE = "string_triple_double"
    STRING_TRIPLE_SINGLE = "string_triple_single"
    WHITESPACE = "whitespace"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: str
    line: int     # 1-based
    column: int   # 1-based

    @property
    def end_column(self) -> int:
        return self.column + len(self.value)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "value": self.value,
                "line": self.line, "column": self.column}


# rule actions
_POP = "@pop"


@dataclass(frozen=True, slots=True)
class _Rule:
    pattern: re.Pattern
    kind: TokenKind
    action: Optional[Union[State, str]] = None   # push a State, or _POP


@dataclass(frozen=True, slots=True)
class _Include:
    state: State


SYMBOLS = r"[=><!~?:&|+\-*/^%.,;@]+"
BRACKETS = r"[{}()\[\]]"


def _string_body(quote: str, triple: bool) -> list[_Rule]:
    q = re.escape(quote)
    if triple:
        return [
            _Rule(re.compile(rf"[^\\{q}]+"), TokenKind.STRING),
            _Rule(re.compile(r"\\."), TokenKind.STRING_ESCAPE),
            _Rule(re.compile(q * 3), TokenKind.STRING, _POP),
            _Rule(re.compile(q), TokenKind.STRING),
        ]
    return [
        _Rule(re.compile(rf"[^\\{q}]+"), TokenKind.STRING),
        _Rule(re.compile(r"\\."), TokenKind.STRING_ESCAPE),
        _Rule(re.compile(q), TokenKind.STRING, _POP),
    ]


class Tokenizer:
    """Line-at-a-time tokenizer; the state returned for one line feeds the next."""

    def __init__(self, table: KeywordTable = DEFAULT_TABLE) -> None:
        words = sorted(table.surface_keywords(), key=lambda w: (-len(w), w))
        self.keyword_pattern = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")
        self.rules: dict[State, list[Union[_Rule, _Include]]] = {
            State.ROOT: [
                _Rule(self.keyword_pattern, TokenKind.KEYWORD),

                _Rule(re.compile(r"\d*\.\d+(?:[eE][\-+]?\d+)?"), TokenKind.NUMBER_FLOAT),
                _Rule(re.compile(r"\d+"), TokenKind.NUMBER),

                _Rule(re.compile(r'"""'), TokenKind.STRING, State.STRING_TRIPLE_DOUBLE),
                _Rule(re.compile(r"'''"), TokenKind.STRING, State.STRING_TRIPLE_SINGLE),
                _Rule(re.compile(r'"(?:[^"\\]|\\.)*$'), TokenKind.STRING_INVALID),  # non-terminated
                _Rule(re.compile(r"'(?:[^'\\]|\\.)*$"), TokenKind.STRING_INVALID),  # non-terminated
                _Rule(re.compile(r'"'), TokenKind.STRING, State.STRING_DOUBLE),
                _Rule(re.compile(r"'"), TokenKind.STRING, State.STRING_SINGLE),

                _Include(State.WHITESPACE),

                _Rule(re.compile(BRACKETS), TokenKind.BRACKET),
                _Rule(re.compile(SYMBOLS), TokenKind.OPERATOR),

                _Rule(re.compile(r"[^\W\d]\w*"), TokenKind.IDENTIFIER),
            ],
            State.STRING_DOUBLE: _string_body('"', triple=False),
            State.STRING_SINGLE: _string_body("'", triple=False),
            State.STRING_TRIPLE_DOUBLE: _string_body('"', triple=True),
            State.STRING_TRIPLE_SINGLE: _string_body("'", triple=True),
            State.WHITESPACE: [
                _Rule(re.compile(r"[ \t\r\f\v]+"), TokenKind.WHITESPACE),
                _Rule(re.compile(r"#.*$"), TokenKind.COMMENT),
            ],
        }

    def _expand(self, state: State) -> Iterable[_Rule]:
        for rule in self.rules[state]:
            if isinstance(rule, _Include):
                yield from self._expand(rule.state)
            else:
                yield rule

    def tokenize_line(self, line: str, state: State = State.ROOT, line_no: int = 1) -> tuple[list[Token], State]:
        """Tokenize one line (no trailing newline). Returns (tokens, state for the next line)."""
        tokens: list[Token] = []
        stack: list[State] = [State.ROOT] if state is State.ROOT else [State.ROOT, state]
        pos, n = 0, len(line)

        while pos < n:
            cur = stack[-1]
            for rule in self._expand(cur):
                m = rule.pattern.match(line, pos)
                if m and m.end() > pos:
                    tokens.append(Token(rule.kind, m.group(0), line_no, pos + 1))
                    pos = m.end()
                    if rule.action == _POP:
                        if len(stack) > 1:
                            stack.pop()
                    elif isinstance(rule.action, State):
                        stack.append(rule.action)
                    break
            else:
                if cur in (State.STRING_DOUBLE, State.STRING_SINGLE):
                    # dangling escape at end of line: rest of the string is broken
                    tokens.append(Token(TokenKind.STRING_INVALID, line[pos:], line_no, pos + 1))
                    pos = n
                    stack.pop()
                elif cur in (State.STRING_TRIPLE_DOUBLE, State.STRING_TRIPLE_SINGLE):
                    tokens.append(Token(TokenKind.STRING, line[pos], line_no, pos + 1))
                    pos += 1
                else:
                    tokens.append(Token(TokenKind.INVALID, line[pos], line_no, pos + 1))
                    pos += 1

        nxt = stack[-1]
        if nxt in (State.STRING_DOUBLE, State.STRING_SINGLE):
            nxt = State.ROOT  # one-line strings never continue
        return tokens, nxt

    def tokenize(self, text: Optional[str]) -> list[Token]:
        """Tokenize a whole buffer; line/column are 1-based."""
        if not text:
            return []
        tokens: list[Token] = []
        state = State.ROOT
        for i, line in enumerate(text.split("\n"), start=1):
            line_tokens, state = self.tokenize_line(line.rstrip("\r"), state, i)
            tokens.extend(line_tokens)
        return tokens

    def tokenize_lines(self, text: Optional[str]) -> list[list[Token]]:
        """Tokens grouped per line; always one list per line of text."""
        lines = (text or "").split("\n")
        out: list[list[Token]] = []
        state = State.ROOT
        for i, line in enumerate(lines, start=1):
            line_tokens, state = self.tokenize_line(line.rstrip("\r"), state, i)
            out.append(line_tokens)
        return out


# ---------- presentation ----------

@dataclass(frozen=True, slots=True)
class TokenStyle:
    foreground: str
    font_style: str = ""


THEME: dict[TokenKind, TokenStyle] = {
    TokenKind.KEYWORD: TokenStyle("0000ff", "bold"),
    TokenKind.COMMENT: TokenStyle("008000", "italic"),
    TokenKind.STRING: TokenStyle("a31515"),
    TokenKind.STRING_ESCAPE: TokenStyle("ff0000"),
    TokenKind.STRING_INVALID: TokenStyle("cd3131", "underline"),
    TokenKind.NUMBER: TokenStyle("098658"),
    TokenKind.NUMBER_FLOAT: TokenStyle("098658"),
    TokenKind.OPERATOR: TokenStyle("000000"),
    TokenKind.BRACKET: TokenStyle("000000"),
    TokenKind.IDENTIFIER: TokenStyle("001080"),
    TokenKind.INVALID: TokenStyle("cd3131", "underline"),
}

EDITOR_COLORS = {"editor.background": "#ffffff", "editor.foreground": "#000000"}


def theme_rules() -> list[dict]:
    """Theme in the host editor's rule-list shape."""
    return [
        {"token": kind.value, "foreground": style.foreground, "fontStyle": style.font_style}
        for kind, style in THEME.items()
    ]


# ---------- language configuration ----------

DEDENT_KEYWORDS = ("okanye_ukuba", "enye", "ngaphandle", "ekugqibeleni")


@dataclass(frozen=True)
class LanguageConfiguration:
    line_comment: str = "#"
    block_comment: tuple[str, str] = ('"""', '"""')
    brackets: tuple[tuple[str, str], ...] = (("{", "}"), ("[", "]"), ("(", ")"))
    auto_closing_pairs: tuple[dict, ...] = (
        {"open": "{", "close": "}"},
        {"open": "[", "close": "]"},
        {"open": "(", "close": ")"},
        {"open": '"', "close": '"', "notIn": ["string"]},
        {"open": "'", "close": "'", "notIn": ["string", "comment"]},
    )
    surrounding_pairs: tuple[tuple[str, str], ...] = (
        ("{", "}"), ("[", "]"), ("(", ")"), ('"', '"'), ("'", "'"),
    )
    increase_indent_pattern: re.Pattern = re.compile(r"^((?!#).)*:\s*$")
    decrease_indent_pattern: re.Pattern = re.compile(
        r"^\s*(?:" + "|".join(DEDENT_KEYWORDS) + r")\b.*:\s*$"
    )

    def should_indent_after(self, line: str) -> bool:
        return bool(self.increase_indent_pattern.match(line or ""))

    def should_outdent(self, line: str) -> bool:
        return bool(self.decrease_indent_pattern.match(line or ""))

    def to_dict(self) -> dict:
        return {
            "comments": {"lineComment": self.line_comment, "blockComment": list(self.block_comment)},
            "brackets": [list(p) for p in self.brackets],
            "autoClosingPairs": [dict(p) for p in self.auto_closing_pairs],
            "surroundingPairs": [{"open": o, "close": c} for o, c in self.surrounding_pairs],
            "indentationRules": {
                "increaseIndentPattern": self.increase_indent_pattern.pattern,
                "decreaseIndentPattern": self.decrease_indent_pattern.pattern,
            },
        }


LANGUAGE_CONFIGURATION = LanguageConfiguration()
