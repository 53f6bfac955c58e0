import pytest

from oapigen.names import (
    escape_path_elements,
    is_go_keyword,
    is_predeclared_go_identifier,
    is_type_reference,
    is_valid_go_identity,
    is_whole_document_reference,
    lowercase_first_character,
    ordered_params_from_uri,
    path_to_type_name,
    ref_path_to_type,
    replace_path_params_with_str,
    sanitize_enum_names,
    sanitize_go_identity,
    schema_has_additional_properties,
    schema_name_to_type_name,
    sorted_keys,
    string_to_go_comment,
    swagger_uri_to_chi_uri,
    swagger_uri_to_echo_uri,
    to_camel_case,
    uppercase_first_character,
)


def test_string_ops():
    assert (
        to_camel_case("word.word-WORD+Word_word~word(Word)Word{Word}Word[Word]Word:Word;")
        == "WordWordWORDWordWordWordWordWordWordWordWordWordWord"
    )
    assert to_camel_case("number-1234") == "Number1234"


def test_first_character_case():
    assert uppercase_first_character("foo") == "Foo"
    assert uppercase_first_character("") == ""
    assert lowercase_first_character("FooBar") == "fooBar"
    assert lowercase_first_character("") == ""


@pytest.mark.parametrize(
    "mapping",
    [
        {"f": None, "c": None, "b": None, "e": None, "d": None, "a": None},
        {"d": 1, "a": 2, "f": 3, "b": 4, "e": 5, "c": 6},
    ],
)
def test_sorted_keys(mapping):
    assert sorted_keys(mapping) == ["a", "b", "c", "d", "e", "f"]


def test_ref_path_to_type():
    assert ref_path_to_type("#/components/schemas/Foo") == "Foo"
    assert ref_path_to_type("#/components/parameters/foo_bar") == "FooBar"

    with pytest.raises(ValueError):
        ref_path_to_type("http://example.com/doc.json#/components/parameters/foo_bar")
    with pytest.raises(ValueError):
        ref_path_to_type("doc.json#/components/parameters/foo_bar")
    with pytest.raises(ValueError, match="deeper than supported"):
        ref_path_to_type("#/components/parameters/foo/components/bar")


def test_ref_path_to_type_with_import_mapping():
    mapping = {"doc.json": "externalRef0"}
    assert ref_path_to_type("doc.json#/components/schemas/foo_bar", mapping) == "externalRef0.FooBar"


def test_ref_path_to_type_rejects_multiple_fragments():
    with pytest.raises(ValueError, match="unsupported reference"):
        ref_path_to_type("a#b#c", {"a": "pkg"})


def test_ref_path_to_type_rejects_empty():
    with pytest.raises(ValueError):
        ref_path_to_type("")


def test_is_whole_document_reference():
    assert is_whole_document_reference("") is False
    assert is_whole_document_reference("#/components/schemas/Foo") is False
    assert is_whole_document_reference("doc.json#/components/schemas/Foo") is False
    assert is_whole_document_reference("doc.json") is True
    assert is_whole_document_reference("../doc.json") is True
    assert is_whole_document_reference("http://example.com/doc.json#/components/parameters/foo_bar") is False
    assert is_whole_document_reference("http://example.com/doc.json") is True


def test_is_type_reference():
    assert is_type_reference("") is False
    assert is_type_reference("#/components/schemas/Foo") is True
    assert is_type_reference("doc.json#/components/schemas/Foo") is True
    assert is_type_reference("doc.json") is False
    assert is_type_reference("../doc.json") is False
    assert is_type_reference("http://example.com/doc.json#/components/parameters/foo_bar") is True
    assert is_type_reference("http://example.com/doc.json") is False


@pytest.mark.parametrize(
    "uri, expected",
    [
        ("/path", "/path"),
        ("/path/{arg}", "/path/:arg"),
        ("/path/{arg1}/{arg2}", "/path/:arg1/:arg2"),
        ("/path/{arg1}/{arg2}/foo", "/path/:arg1/:arg2/foo"),
        ("/path/{arg}/foo", "/path/:arg/foo"),
        ("/path/{arg*}/foo", "/path/:arg/foo"),
        ("/path/{.arg}/foo", "/path/:arg/foo"),
        ("/path/{.arg*}/foo", "/path/:arg/foo"),
        ("/path/{;arg}/foo", "/path/:arg/foo"),
        ("/path/{;arg*}/foo", "/path/:arg/foo"),
        ("/path/{?arg}/foo", "/path/:arg/foo"),
        ("/path/{?arg*}/foo", "/path/:arg/foo"),
    ],
)
def test_swagger_uri_to_echo_uri(uri, expected):
    assert swagger_uri_to_echo_uri(uri) == expected


def test_swagger_uri_to_chi_uri():
    assert swagger_uri_to_chi_uri("/path/{.arg*}/foo/{;b}") == "/path/{arg}/foo/{b}"
    assert swagger_uri_to_chi_uri("/path") == "/path"


def test_ordered_params_from_uri():
    assert ordered_params_from_uri("/path/{param1}/{.param2}/{;param3*}/foo") == [
        "param1",
        "param2",
        "param3",
    ]
    assert ordered_params_from_uri("/path/foo") == []


def test_replace_path_params_with_str():
    assert replace_path_params_with_str("/path/{param1}/{.param2}/{;param3*}/foo") == "/path/%s/%s/%s/foo"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ""),
        (" ", ""),
        ("Single Line", "// Single Line"),
        ("    Single Line", "//     Single Line"),
        (
            "Multi\nLine\n  With\n    Spaces\n\tAnd\n\t\tTabs\n",
            "// Multi\n// Line\n//   With\n//     Spaces\n// \tAnd\n// \t\tTabs",
        ),
        ("a\r\nb\rc", "// a\n// b\n// c"),
    ],
)
def test_string_to_go_comment(text, expected):
    assert string_to_go_comment(text) == expected


def test_escape_path_elements():
    assert escape_path_elements("/foo/bar/baz") == "/foo/bar/baz"
    assert escape_path_elements("foo/bar/baz") == "foo/bar/baz"
    assert escape_path_elements("/foo/bar:baz") == "/foo/bar%3Abaz"
    assert escape_path_elements("/foo/{id}/a b") == "/foo/{id}/a+b"


def test_keyword_and_predeclared():
    assert is_go_keyword("func") is True
    assert is_go_keyword("foo") is False
    assert is_predeclared_go_identifier("int64") is True
    assert is_predeclared_go_identifier("Int64") is False


def test_is_valid_go_identity():
    assert is_valid_go_identity("foo") is True
    assert is_valid_go_identity("break") is False
    assert is_valid_go_identity("int") is False


@pytest.mark.parametrize(
    "name, expected",
    [
        ("foo", "foo"),
        ("1foo", "_foo"),
        ("a-b c", "a_b_c"),
        ("break", "_break"),
        ("int", "_int"),
        ("x9", "x9"),
    ],
)
def test_sanitize_go_identity(name, expected):
    assert sanitize_go_identity(name) == expected


def test_sanitize_enum_names_illegal_values():
    values = ["Bar", "Foo", "Foo Bar", "Foo-Bar", "1Foo", " Foo", " Foo ", "_Foo_"]
    assert sanitize_enum_names(values) == {
        "Bar": "Bar",
        "Foo": "Foo",
        "FooBar": "Foo Bar",
        "FooBar1": "Foo-Bar",
        "Foo1": "1Foo",
        "Foo2": " Foo",
        "Foo3": " Foo ",
        "Foo4": "_Foo_",
    }


def test_sanitize_enum_names_drops_duplicates():
    assert sanitize_enum_names(["car", "dog", "car"]) == {"Car": "car", "Dog": "dog"}


@pytest.mark.parametrize(
    "name, expected",
    [
        ("$", "DollarSign"),
        ("foo_bar", "FooBar"),
        ("1st-place", "N1stPlace"),
        ("", ""),
    ],
)
def test_schema_name_to_type_name(name, expected):
    assert schema_name_to_type_name(name) == expected


@pytest.mark.parametrize(
    "schema, expected",
    [
        ({}, False),
        ({"additionalProperties": False}, False),
        ({"additionalProperties": True}, True),
        ({"additionalProperties": {"type": "string"}}, True),
        ({"additionalProperties": {}}, True),
    ],
)
def test_schema_has_additional_properties(schema, expected):
    assert schema_has_additional_properties(schema) is expected


def test_path_to_type_name_does_not_mutate():
    path = ["object", "field_one", "nested-field"]
    assert path_to_type_name(path) == "Object_FieldOne_NestedField"
    assert path == ["object", "field_one", "nested-field"]