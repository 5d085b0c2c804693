import pytest

from vingd.common.exceptions import FormatError
from vingd.common.safeformat import SafeFormatter, safeformat


def test_safeformat_substitutes_in_order() -> None:
    path = safeformat("/objects/{:int}/tokens/{:hex}", 42, "ab12EF")
    assert path == "/objects/42/tokens/ab12EF"


def test_safeformat_explicit_indices() -> None:
    assert safeformat("{1:int}-{0:identifier}", "a_b-c", 7) == "7-a_b-c"
    assert safeformat("{0:int}/{0:int}", 3) == "3/3"


def test_safeformat_string_is_not_validated() -> None:
    assert safeformat("/users/username={:string}", "a/b?c") == "/users/username=a/b?c"


def test_safeformat_short_type_names() -> None:
    assert safeformat("{:ident}:{:str}", "key-1", "x y") == "key-1:x y"


def test_safeformat_leaves_other_text_alone() -> None:
    assert safeformat("/registry/objects/") == "/registry/objects/"
    assert safeformat("{name}/{:int}", 5) == "{name}/5"


def test_safeformat_identifier_allows_empty() -> None:
    assert safeformat("/x/{:identifier}", "") == "/x/"


@pytest.mark.parametrize(
    ("pattern", "value"),
    [
        ("{:hex}", "12g"),
        ("{:int}", "1/2"),
        ("{:int}", ""),
        ("{:int}", "-1"),
        ("{:identifier}", "a.b"),
        ("{:identifier}", "../x"),
        ("{:int}", "٣"),  # ARABIC-INDIC DIGIT THREE
    ],
)
def test_safeformat_rejects_invalid_characters(pattern: str, value: str) -> None:
    with pytest.raises(FormatError, match="not of type"):
        safeformat(pattern, value)


def test_safeformat_index_out_of_bounds() -> None:
    with pytest.raises(FormatError, match="Index out of bounds"):
        safeformat("{:int}/{:int}", 1)
    with pytest.raises(FormatError, match="Index out of bounds"):
        safeformat("{2:int}", 1, 2)


def test_safeformat_unknown_type() -> None:
    with pytest.raises(FormatError, match="Invalid converter/type"):
        safeformat("{:float}", 1.5)


def test_format_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        SafeFormatter("{:int}").format("x")


def test_formatter_is_reusable() -> None:
    formatter = SafeFormatter("/purchases/{:int}")
    assert formatter.format(1) == "/purchases/1"
    assert formatter.format(2) == "/purchases/2"
