import pytest
from isipython import provide_completions
from isipython.completion import BUILTINS, CompletionProvider
from isipython.keywords import DEFAULT_TABLE
from isipython.models import Position, SuggestionKind

pytestmark = pytest.mark.e2e

BUFFER = "chaza add(a, b):\n    buyisela a + b\n"


def _labels(rows):
    return [s.label for s in rows]


def test_user_function_outranks_static_suggestions():
    rows = provide_completions(BUFFER, Position(3, 1))
    first = rows[0]
    assert first.label == "add"
    assert first.detail == "user-defined function"
    assert first.kind is SuggestionKind.FUNCTION
    assert first.insert_text == "add($0)"
    assert all(first.priority > s.priority for s in rows[1:])


def test_dynamic_wins_label_collision():
    rows = provide_completions("print = 3\n", Position(2, 1))
    prints = [s for s in rows if s.label == "print"]
    assert len(prints) == 1
    assert prints[0].dynamic and prints[0].detail == "user-defined variable"


def test_static_catalogue_has_every_surface_keyword():
    rows = provide_completions("", Position(1, 1))
    labels = set(_labels(rows))
    assert set(DEFAULT_TABLE.surface_keywords()) <= labels
    assert len(rows) == len(DEFAULT_TABLE) + len(BUILTINS)

    ukuba = next(s for s in rows if s.label == "ukuba")
    assert ukuba.kind is SuggestionKind.KEYWORD
    assert "${1:condition}" in ukuba.insert_text and ukuba.is_snippet
    assert "if" in ukuba.detail

    chaza = next(s for s in rows if s.label == "chaza")
    assert "${1:function_name}" in chaza.insert_text
    assert "def" in chaza.detail

    akukho = next(s for s in rows if s.label == "Akukho")
    assert akukho.insert_text == "Akukho" and not akukho.is_snippet


def test_variables_classes_and_first_occurrence():
    src = "igama = 'Thando'\nx = 1\niklasi Inja:\n    dlula\nchaza x():\n    dlula\nx == 2\n"
    dyn = CompletionProvider().extract_user_definitions(src)
    assert [(s.label, s.kind) for s in dyn] == [
        ("igama", SuggestionKind.VARIABLE),
        ("x", SuggestionKind.VARIABLE),
        ("Inja", SuggestionKind.CLASS),
    ]


def test_reserved_words_are_never_user_identifiers():
    dyn = CompletionProvider().extract_user_definitions("ukuba = 3\nif = 2\nTrue = 1\n")
    assert dyn == []


def test_prefix_at_cursor_filters():
    assert _labels(provide_completions("ch", Position(1, 3))) == ["chaza"]
    assert _labels(provide_completions("total = 0\nto", Position(2, 3))) == ["total"]
    rows = provide_completions("ukuba x:\n    pr", Position(2, 7))
    assert _labels(rows) == ["print"]


def test_no_suggestions_inside_strings_or_comments():
    assert provide_completions('print("uk', Position(1, 10)) == []
    assert provide_completions("# uk", Position(1, 5)) == []
    assert provide_completions('"""\nuk', Position(2, 3)) == []


def test_positions_are_clamped_and_optional():
    assert provide_completions(BUFFER, Position(99, 99))
    assert provide_completions(BUFFER, Position(0, -5))
    assert provide_completions(BUFFER, (1, 1))
    assert provide_completions(BUFFER)[0].label == "add"


def test_empty_and_none_buffers():
    assert provide_completions("", Position(1, 1))
    assert provide_completions(None, None)


def test_cap_on_results():
    provider = CompletionProvider(max_suggestions=5)
    assert len(provider.provide_completions("", Position(1, 1))) == 5


def test_suggestion_to_dict_wire_names():
    d = provide_completions(BUFFER, Position(3, 1))[0].to_dict()
    assert d == {
        "label": "add", "kind": "function", "insertText": "add($0)",
        "detail": "user-defined function", "priority": 100, "isSnippet": True,
    }
