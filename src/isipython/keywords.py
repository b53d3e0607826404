# src/isipython/keywords.py
"""
The bidirectional isiPython <-> Python keyword table.

One KeywordTable is built once (DEFAULT_TABLE) and injected into the
translator, validator and completion provider. It is read-only: the two
mappings are exposed as MappingProxyType views and each entry is frozen.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True, slots=True)
class KeywordEntry:
    """
    Attributes
    ----------
    surface : str
        The isiXhosa keyword the student types (e.g. "ukuba").
    target : str
        The Python reserved word it stands for (e.g. "if").
    meaning : str
        Short English gloss, shown as completion detail.
    category : str
        literal | logical | operator | control | loop | definition |
        module | exception | loop-control | scope
    snippet : str | None
        Snippet template for block-forming keywords; None for plain words.
    """
    surface: str
    target: str
    meaning: str
    category: str
    snippet: Optional[str] = None

    @property
    def opens_block(self) -> bool:
        return self.snippet is not None


ISIPYTHON_KEYWORDS: tuple[KeywordEntry, ...] = (
    # Boolean and None values
    KeywordEntry("Ubuxoki", "False", "falsehood", "literal"),
    KeywordEntry("Inyaniso", "True", "truth", "literal"),
    KeywordEntry("Akukho", "None", "nothing", "literal"),

    # Logical operators
    KeywordEntry("kwaye", "and", "and also", "logical"),
    KeywordEntry("okanye", "or", "or", "logical"),
    KeywordEntry("hayi", "not", "no / not", "logical"),
    KeywordEntry("ngaphakathi", "in", "inside", "operator"),
    KeywordEntry("njenge", "as", "like / as", "operator"),
    KeywordEntry("ngu", "is", "it is", "operator"),

    # Control flow
    KeywordEntry("okanye_ukuba", "elif", "or if", "control",
                 "okanye_ukuba ${1:condition}:\n\t$0"),
    KeywordEntry("ukuba", "if", "if / when", "control",
                 "ukuba ${1:condition}:\n\t$0"),
    KeywordEntry("enye", "else", "another / else", "control",
                 "enye:\n\t$0"),
    KeywordEntry("ngokulandelelana", "for", "in sequence", "loop",
                 "ngokulandelelana ${1:item} ngaphakathi ${2:iterable}:\n\t$0"),
    KeywordEntry("ngexesha", "while", "during the time", "loop",
                 "ngexesha ${1:condition}:\n\t$0"),

    # Functions and classes
    KeywordEntry("chaza", "def", "define / explain", "definition",
                 "chaza ${1:function_name}(${2:parameters}):\n\t$0"),
    KeywordEntry("iklasi", "class", "borrowed from 'class'", "definition",
                 "iklasi ${1:ClassName}:\n\t$0"),
    KeywordEntry("umsebenzi", "lambda", "a task / function", "definition"),
    KeywordEntry("buyisela", "return", "give back", "definition"),
    KeywordEntry("velisa", "yield", "produce", "definition"),

    # Modules
    KeywordEntry("ukusuka", "from", "from", "module"),
    KeywordEntry("ngenisa", "import", "bring in", "module"),

    # Exceptions
    KeywordEntry("zama", "try", "attempt", "exception", "zama:\n\t$0"),
    KeywordEntry("ngaphandle", "except", "except for", "exception",
                 "ngaphandle ${1:Exception} njenge ${2:e}:\n\t$0"),
    KeywordEntry("ekugqibeleni", "finally", "finally", "exception",
                 "ekugqibeleni:\n\t$0"),
    KeywordEntry("phakamisa", "raise", "lift up", "exception"),
    KeywordEntry("qinisekisa", "assert", "make sure", "exception"),

    # Loop control
    KeywordEntry("yekisa", "break", "stop", "loop-control"),
    KeywordEntry("qhubeka", "continue", "carry on", "loop-control"),
    KeywordEntry("dlula", "pass", "pass through", "loop-control"),

    # Scope, async, context managers
    KeywordEntry("jikelele", "global", "all around", "scope"),
    KeywordEntry("ingaphandle", "nonlocal", "the outside", "scope"),
    KeywordEntry("ngemva", "async", "afterwards", "scope"),
    KeywordEntry("linda", "await", "wait", "scope"),
    KeywordEntry("nge", "with", "with", "scope",
                 "nge ${1:expression} njenge ${2:name}:\n\t$0"),
    KeywordEntry("cima", "del", "erase", "scope"),
)


class KeywordTable:
    """
    Immutable surface <-> target dictionary.

    Raises ValueError at construction if either side repeats, so the reverse
    mapping is always the exact inverse of the forward one.
    """

    def __init__(self, entries: Iterable[KeywordEntry]) -> None:
        entries = tuple(entries)
        forward: dict[str, KeywordEntry] = {}
        reverse: dict[str, KeywordEntry] = {}
        for e in entries:
            if e.surface in forward:
                raise ValueError(f"duplicate surface keyword: {e.surface!r}")
            if e.target in reverse:
                raise ValueError(
                    f"target keyword {e.target!r} already mapped from "
                    f"{reverse[e.target].surface!r}; cannot also map {e.surface!r}"
                )
            if e.surface in reverse or e.target in forward:
                raise ValueError(f"keyword {e.surface!r}/{e.target!r} appears on both sides")
            forward[e.surface] = e
            reverse[e.target] = e

        self._entries = entries
        self._by_surface: Mapping[str, KeywordEntry] = MappingProxyType(forward)
        self._by_target: Mapping[str, KeywordEntry] = MappingProxyType(reverse)
        self.forward: Mapping[str, str] = MappingProxyType({s: e.target for s, e in forward.items()})
        self.reverse: Mapping[str, str] = MappingProxyType({t: e.surface for t, e in reverse.items()})

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    # ------------- lookups -------------

    def target_for(self, surface: str) -> Optional[str]:
        return self.forward.get(surface)

    def surface_for(self, target: str) -> Optional[str]:
        return self.reverse.get(target)

    def entry(self, word: str) -> Optional[KeywordEntry]:
        """Entry for a word of either language, or None."""
        return self._by_surface.get(word) or self._by_target.get(word)

    def is_surface(self, word: str) -> bool:
        return word in self.forward

    def is_target(self, word: str) -> bool:
        return word in self.reverse

    def is_reserved(self, word: str) -> bool:
        return word in self.forward or word in self.reverse

    def surface_keywords(self) -> list[str]:
        return list(self.forward)

    def target_keywords(self) -> list[str]:
        return list(self.reverse)

    def maps(self) -> dict[str, dict[str, str]]:
        """Fresh, mutable copies of both directions."""
        return {
            "isipython_to_python": dict(self.forward),
            "python_to_isipython": dict(self.reverse),
        }


DEFAULT_TABLE = KeywordTable(ISIPYTHON_KEYWORDS)
