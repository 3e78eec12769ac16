from __future__ import annotations

import pytest

from inidoc.ini.codec import IniCodec
from inidoc.ini.consts import IniReaderError
from inidoc.ini.model import CommentElement, SectionElement, TextElement, ValueElement
from inidoc.ini.settings import IniSettings


@pytest.fixture
def codec() -> IniCodec:
    return IniCodec(IniSettings())


def test_encode_name_escapes_every_reserved_char(codec: IniCodec) -> None:
    assert codec.encode_name("a=b") == "a|=b"
    assert codec.encode_name("[x];") == "|[x|]|;"
    assert codec.encode_name("a|b") == "a||b"


def test_encode_section_name_escapes_only_brackets(codec: IniCodec) -> None:
    assert codec.encode_section_name("a]b=;") == "a|]b=;"


def test_encode_value_escapes_only_breaks_and_escape(codec: IniCodec) -> None:
    assert codec.encode_value("a\nb\r|[=]") == "a|nb|r||[=]"


def test_decode_leaves_unknown_sequences(codec: IniCodec) -> None:
    assert codec.decode("|x") == "|x"
    assert codec.decode("abc|") == "abc|"
    assert codec.decode("no escapes") == "no escapes"


def test_decode_doubled_escape_before_designator(codec: IniCodec) -> None:
    # `||n` is a literal `|` followed by `n`, not a line feed.
    assert codec.decode("||n") == "|n"
    assert codec.decode("|||n") == "|\n"


_TAILS = ["", "n", "r", "[", "]", ";", "=", "x", "\n", "\r", "\r\n"]
_SAMPLES = [
    "|" * n + tail for n in range(0, 9) for tail in _TAILS
] + [
    tail + "|" * n + tail for n in range(1, 9) for tail in _TAILS
] + ["[a=b];c|d\ne", " spaced  ", "ünïcödé|=", "|n|r|[|]|;|="]


@pytest.mark.parametrize("text", _SAMPLES)
def test_decode_inverts_every_encoder(codec: IniCodec, text: str) -> None:
    assert codec.decode(codec.encode_name(text)) == text
    assert codec.decode(codec.encode_section_name(text)) == text
    assert codec.decode(codec.encode_value(text)) == text


def test_custom_tokens() -> None:
    codec = IniCodec(IniSettings(escape="\\", separator=":", comment_start="#"))
    assert codec.encode_name("a:b#") == "a\\:b\\#"
    assert codec.decode("a\\:b\\#\\\\") == "a:b#\\"
    assert codec.classify("a\\:b:c") == ValueElement("a:b", "c")
    assert codec.classify("# note") == CommentElement(" note")
    assert codec.classify("a=b") == TextElement("a=b")


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("[invalid", TextElement("[invalid")),
        ("  [ S ]  ", SectionElement(" S ")),
        ("[a|]b]", SectionElement("a]b")),
        ("  ; hi ", CommentElement(" hi ")),
        ("k=v=w", ValueElement("k", "v=w")),
        ("a|=b=c", ValueElement("a=b", "c")),
        ("k=", ValueElement("k", "")),
        ("plain text", TextElement("plain text")),
        ("", TextElement("")),
    ],
)
def test_classify(codec: IniCodec, line: str, expected: object) -> None:
    assert codec.classify(line) == expected


@pytest.mark.parametrize(
    ("line", "error"),
    [
        ("[]", IniReaderError.INVALID_SECTION_NAME),
        ("  [   ]", IniReaderError.INVALID_SECTION_NAME),
        ("=value", IniReaderError.INVALID_VALUE_NAME),
        ("  =value", IniReaderError.INVALID_VALUE_NAME),
    ],
)
def test_classify_reports_structural_errors(
    codec: IniCodec, line: str, error: IniReaderError
) -> None:
    assert codec.classify(line) is error


@pytest.mark.parametrize(
    "kwargs",
    [
        {"escape": "||"},
        {"escape": ""},
        {"separator": ";"},
        {"escape": "n"},
        {"section_end": "r"},
        {"comment_start": " "},
    ],
)
def test_settings_validation(kwargs: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        IniSettings(**kwargs)
