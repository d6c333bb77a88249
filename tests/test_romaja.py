import pytest
from dero.editor.boundary import Converted, Rejected
from dero.romaja import compose_syllable, convert, convert_escaped


def test_compose_syllable():
    assert compose_syllable(0, 0) == "가"
    assert compose_syllable(0, 0, 4) == "간"
    assert compose_syllable(11, 4) == "어"
    assert compose_syllable(18, 20, 27) == "힣"


@pytest.mark.parametrize(
    "candidate,expected",
    (
        ("gan", "간"),
        ("annyeong", "안녕"),
        ("annyeonghaseyo", "안녕하세요"),
        ("hangug", "한국"),
        ("gana", "가나"),
        ("seoul", "서울"),
        ("kkachi", "까치"),
        ("ssal", "쌀"),
        ("dalg", "닭"),
        ("eopsda", "없다"),
        ("Seoul", "서울"),
        ("saram ida.", "사람 이다."),
        ("oe", "외"),
        ("wae", "왜"),
        ("", ""),
        ("123 !", "123 !"),
    ),
)
def test_convert(candidate, expected):
    assert convert(candidate) == Converted(text=expected)


@pytest.mark.parametrize("candidate", ["g", "gangn", "x", "hanx", "ga\\", "nng"])
def test_rejects_incomplete_units(candidate):
    assert convert(candidate) == Rejected()


def test_escapes_pass_through():
    assert convert("\\gan") == Converted(text="g안")
    assert convert("a\\\\b") == Rejected()
    assert convert("a\\\\ba") == Converted(text="아\\바")


@pytest.mark.parametrize(
    "text,expected",
    (
        ("gan", "간"),
        ("gangn", "강n"),
        ("xga", "x가"),
        ("hello world", "헬로 월ld"),
        ("ga\\", "가\\"),
        ("\\nanna", "n안나"),
    ),
)
def test_convert_escaped(text, expected):
    assert convert_escaped(text) == expected


def test_long_runs_convert():
    assert convert("ga" * 1500) == Converted(text="가" * 1500)
    assert convert("ga" * 1500 + "x") == Rejected()
    assert convert_escaped("ga" * 1500) == "가" * 1500
    assert convert_escaped("ga" * 1500 + "x") == "가" * 1500 + "x"
