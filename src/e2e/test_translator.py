import pytest
from isipython import (
    auto_translate, detect_dominant, translate_forward, translate_reverse,
    translate_lines, translate_lines_reverse,
)
from isipython.keywords import DEFAULT_TABLE
from isipython.models import Dominance, Language

pytestmark = pytest.mark.e2e


def test_compound_keyword_wins_over_its_parts():
    assert translate_forward("okanye_ukuba x:") == "elif x:"
    assert translate_reverse("elif x:") == "okanye_ukuba x:"


def test_keywords_inside_identifiers_are_left_alone():
    assert translate_forward("my_ukuba_flag = 1") == "my_ukuba_flag = 1"
    assert translate_forward("ukubaX = chazaY") == "ukubaX = chazaY"
    assert translate_reverse("iffy = define") == "iffy = define"


def test_translates_complete_function():
    src = (
        "chaza hello():\n"
        "    ukuba Inyaniso:\n"
        "        buyisela \"Hello World\"\n"
    )
    expected = (
        "def hello():\n"
        "    if True:\n"
        "        return \"Hello World\"\n"
    )
    assert translate_forward(src) == expected
    assert translate_reverse(expected) == src


def test_output_words_are_not_translated_twice():
    # "okanye" -> "or" must not be re-read; one pass over the input only
    assert translate_forward("x okanye y kwaye hayi z") == "x or y and not z"


def test_string_literals_are_rewritten_too():
    # text-level translation: look-alikes in strings change as well
    assert translate_forward('print("ukuba")') == 'print("if")'


@pytest.mark.parametrize("blank", ["", "   ", "\n\t\n", None])
def test_blank_input_translates_to_empty(blank):
    assert translate_forward(blank) == ""
    assert translate_reverse(blank) == ""


def test_non_string_input_is_a_type_error():
    with pytest.raises(TypeError):
        translate_forward(42)  # type: ignore[arg-type]


def test_detect_dominant():
    assert detect_dominant("ukuba x > 5:") is Dominance.SURFACE
    assert detect_dominant("if x > 5:") is Dominance.TARGET
    assert detect_dominant("ukuba x:\n    return 1") is Dominance.BOTH
    assert detect_dominant("x = 1") is Dominance.NEITHER
    assert detect_dominant("") is Dominance.NEITHER


def test_translated_surface_catalogue_is_not_surface_dominant():
    for word in DEFAULT_TABLE.surface_keywords():
        assert detect_dominant(translate_forward(word)) is not Dominance.SURFACE
    everything = " ".join(DEFAULT_TABLE.surface_keywords())
    assert detect_dominant(translate_forward(everything)) is Dominance.TARGET


def test_auto_translate_surface_to_target():
    res = auto_translate("ukuba Inyaniso:")
    assert res.translated_code == "if True:"
    assert res.source_language is Language.ISIPYTHON
    assert res.target_language is Language.PYTHON


def test_auto_translate_target_to_surface():
    res = auto_translate("if True:")
    assert res.translated_code == "ukuba Inyaniso:"
    assert res.source_language is Language.PYTHON
    assert res.target_language is Language.ISIPYTHON


def test_auto_translate_mixed_goes_forward():
    res = auto_translate("ukuba x:\n    return 1")
    assert res.translated_code == "if x:\n    return 1"
    assert res.source_language is Language.ISIPYTHON


def test_auto_translate_neither_and_empty():
    res = auto_translate("x = 1")
    assert res.translated_code == "x = 1"
    assert res.source_language is Language.UNKNOWN
    assert res.target_language is Language.NONE

    empty = auto_translate("  ")
    assert empty.translated_code == ""
    assert empty.to_dict() == {"translatedCode": "", "sourceLanguage": "unknown", "targetLanguage": "none"}


def test_line_variants_preserve_length_and_order():
    lines = ["ukuba x:", "", "    buyisela Akukho", "   "]
    out = translate_lines(lines)
    assert out == ["if x:", "", "    return None", ""]
    assert translate_lines_reverse(out) == ["ukuba x:", "", "    buyisela Akukho", ""]
    assert translate_lines([]) == []
