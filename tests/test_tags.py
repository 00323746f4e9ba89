import pytest

from envtag.tags import FieldSpec, parse_tag, split_options


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("NOT_REQUIRED,default=required", FieldSpec(keys=("NOT_REQUIRED",), fallback="required")),
        ("REQUIRED,required", FieldSpec(keys=("REQUIRED",), required=True)),
        (
            "REQUIRED_WITH_DEFAULT,default=default,required",
            FieldSpec(keys=("REQUIRED_WITH_DEFAULT",), fallback="default", required=True),
        ),
        (
            "SINGLE_KEY,required,default=default",
            FieldSpec(keys=("SINGLE_KEY",), fallback="default", required=True),
        ),
        (
            "MULTI_KEY1|MULTI_KEY2|MULTI_KEY3,required,default=default",
            FieldSpec(
                keys=("MULTI_KEY1", "MULTI_KEY2", "MULTI_KEY3"), fallback="default", required=True
            ),
        ),
        (
            "SQUARE_BRACKETS,default=[item1,item2,item3]",
            FieldSpec(keys=("SQUARE_BRACKETS",), fallback="item1,item2,item3"),
        ),
        (
            "SQUARE_BRACKETS,default=[item1,item2,item3],required",
            FieldSpec(keys=("SQUARE_BRACKETS",), fallback="item1,item2,item3", required=True),
        ),
        ("KEY,fallback=value", FieldSpec(keys=("KEY",), fallback="value")),
        ("KEY,file", FieldSpec(keys=("KEY",), file=True)),
        (
            "ADDR,default=${HOST}:${PORT},expand",
            FieldSpec(keys=("ADDR",), fallback="${HOST}:${PORT}", expand=True),
        ),
        ("KEY, required", FieldSpec(keys=("KEY",), required=True)),
        ("KEY,unknown,required", FieldSpec(keys=("KEY",), required=True)),
    ],
)
def test_parse_tag(tag, expected):
    assert parse_tag(tag) == expected


def test_parse_tag_without_options():
    spec = parse_tag("PRIMARY|SECONDARY")
    assert spec.keys == ("PRIMARY", "SECONDARY")
    assert spec.primary_key == "PRIMARY"
    assert spec.fallback == ""
    assert not (spec.required or spec.file or spec.expand)


def test_parse_empty_tag():
    assert parse_tag("") == FieldSpec(keys=("",))


def test_split_options_honours_nested_brackets():
    assert split_options("default=[a,[b,c]],required") == ["default=[a,[b,c]]", "required"]
    assert parse_tag("K,default=[a,[b,c]],file").fallback == "a,[b,c]"


def test_last_fallback_wins():
    assert parse_tag("K,default=one,fallback=two").fallback == "two"
