"""Naming helpers: identifiers, references, path templates and comments."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote_plus

__all__ = [
    "uppercase_first_character",
    "lowercase_first_character",
    "to_camel_case",
    "sorted_keys",
    "ref_path_to_type",
    "is_type_reference",
    "is_whole_document_reference",
    "swagger_uri_to_echo_uri",
    "swagger_uri_to_chi_uri",
    "ordered_params_from_uri",
    "replace_path_params_with_str",
    "is_go_keyword",
    "is_predeclared_go_identifier",
    "is_go_identity",
    "is_valid_go_identity",
    "sanitize_go_identity",
    "sanitize_enum_names",
    "schema_name_to_type_name",
    "schema_has_additional_properties",
    "path_to_type_name",
    "string_to_go_comment",
    "escape_path_elements",
]

_PATH_PARAM_RE = re.compile(r"\{[.;?]?([^{}*]+)\*?\}")

_CAMEL_SEPARATORS = frozenset("-#@!$&=.+:;_~ (){}[]")

_GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer",
        "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
        "interface", "map", "package", "range", "return", "select", "struct",
        "switch", "type", "var",
    }
)

_GO_PREDECLARED = frozenset(
    {
        # Types
        "bool", "byte", "complex64", "complex128", "error", "float32",
        "float64", "int", "int8", "int16", "int32", "int64", "rune", "string",
        "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
        # Constants
        "true", "false", "iota",
        # Zero value
        "nil",
        # Functions
        "append", "cap", "close", "complex", "copy", "delete", "imag", "len",
        "make", "new", "panic", "print", "println", "real", "recover",
    }
)


def _category(ch: str) -> str:
    return unicodedata.category(ch)


def _is_upper(ch: str) -> bool:
    return _category(ch) == "Lu"


def _is_lower(ch: str) -> bool:
    return _category(ch) == "Ll"


def _is_digit(ch: str) -> bool:
    return _category(ch) == "Nd"


def _is_letter(ch: str) -> bool:
    return _category(ch).startswith("L")


def _is_number(ch: str) -> bool:
    return _category(ch).startswith("N")


def uppercase_first_character(text: str) -> str:
    """Upper-case the first character of ``text``."""
    if not text:
        return ""
    return text[0].upper() + text[1:]


def lowercase_first_character(text: str) -> str:
    """Lower-case the first character of ``text``."""
    if not text:
        return ""
    return text[0].lower() + text[1:]


def to_camel_case(text: str) -> str:
    """Convert a delimited, query-arg style string to CamelCase.

    Characters that are neither letters with case nor decimal digits are
    dropped; a lower-case letter after a separator (or at the start) is
    capitalised.
    """
    parts: list[str] = []
    cap_next = True
    for ch in text.strip(" "):
        if _is_upper(ch) or _is_digit(ch):
            parts.append(ch)
        elif _is_lower(ch):
            parts.append(ch.upper() if cap_next else ch)
        cap_next = ch in _CAMEL_SEPARATORS
    return "".join(parts)


def sorted_keys(mapping: Mapping[str, Any]) -> list[str]:
    """Return the keys of ``mapping`` in sorted order."""
    return sorted(mapping)


def ref_path_to_type(ref_path: str, import_mapping: Mapping[str, str] | None = None) -> str:
    """Turn a ``$ref`` value into a Go type name.

    Local references such as ``#/components/schemas/Foo`` become ``Foo``.
    Remote references (``doc.json#/components/schemas/Foo``) are resolved
    through ``import_mapping``, which maps a document to a package name.
    Raises ``ValueError`` for unsupported references.
    """
    if not ref_path:
        raise ValueError("empty reference")
    if ref_path.startswith("#"):
        parts = ref_path.split("/")
        if len(parts) != 4:
            raise ValueError(
                f"Parameter nesting is deeper than supported: {ref_path} has {len(parts)}"
            )
        return schema_name_to_type_name(parts[3])

    parts = ref_path.split("#")
    if len(parts) != 2:
        raise ValueError(f"unsupported reference: {ref_path}")
    remote, flat = parts
    mapping = import_mapping or {}
    if remote not in mapping:
        raise ValueError(
            f"unrecognized external reference '{remote}'; please provide the known "
            "import for this reference using option --import-mapping"
        )
    return f"{mapping[remote]}.{ref_path_to_type('#' + flat, mapping)}"


def is_type_reference(ref: str) -> bool:
    """Whether ``ref`` points at something that can become a Go type."""
    return ref != "" and not is_whole_document_reference(ref)


def is_whole_document_reference(ref: str) -> bool:
    """Whether ``ref`` refers to a whole document rather than a fragment."""
    return ref != "" and "#" not in ref


def swagger_uri_to_echo_uri(uri: str) -> str:
    """Rewrite ``{param}`` style path parameters as ``:param``."""
    return _PATH_PARAM_RE.sub(r":\1", uri)


def swagger_uri_to_chi_uri(uri: str) -> str:
    """Rewrite any path parameter form as a plain ``{param}``."""
    return _PATH_PARAM_RE.sub(r"{\1}", uri)


def ordered_params_from_uri(uri: str) -> list[str]:
    """Return the names of path parameters in the order they appear."""
    return _PATH_PARAM_RE.findall(uri)


def replace_path_params_with_str(uri: str) -> str:
    """Replace every path parameter with ``%s``."""
    return _PATH_PARAM_RE.sub("%s", uri)


def is_go_keyword(name: str) -> bool:
    """Whether ``name`` is a Go keyword."""
    return name in _GO_KEYWORDS


def is_predeclared_go_identifier(name: str) -> bool:
    """Whether ``name`` is a predeclared Go identifier."""
    return name in _GO_PREDECLARED


def _valid_identity_char(index: int, ch: str) -> bool:
    if index == 0 and _is_number(ch):
        return False
    return _is_letter(ch) or ch == "_" or _is_number(ch)


def is_go_identity(name: str) -> bool:
    """Whether ``name`` is made only of identifier characters and is a keyword."""
    if not all(_valid_identity_char(i, ch) for i, ch in enumerate(name)):
        return False
    return is_go_keyword(name)


def is_valid_go_identity(name: str) -> bool:
    """Whether ``name`` may be used as a variable, constant or type name."""
    if is_go_identity(name):
        return False
    return not is_predeclared_go_identifier(name)


def sanitize_go_identity(name: str) -> str:
    """Replace illegal characters with ``_`` and guard reserved names."""
    sanitized = "".join(
        ch if _valid_identity_char(i, ch) else "_" for i, ch in enumerate(name)
    )
    if is_go_keyword(sanitized) or is_predeclared_go_identifier(sanitized):
        sanitized = "_" + sanitized
    if not is_valid_go_identity(sanitized):
        raise RuntimeError(f"failed to sanitize identifier {name!r}")
    return sanitized


def sanitize_enum_names(enum_names: Iterable[str]) -> dict[str, str]:
    """Map sanitized, de-duplicated constant names to their enum values.

    Duplicate values are dropped; names that collide after sanitizing get
    a numeric suffix counting earlier collisions.
    """
    unique = list(dict.fromkeys(enum_names))
    seen: dict[str, int] = {}
    result: dict[str, str] = {}
    for value in unique:
        sanitized = schema_name_to_type_name(sanitize_go_identity(value))
        if sanitized in seen:
            result[f"{sanitized}{seen[sanitized]}"] = value
        else:
            result[sanitized] = value
        seen[sanitized] = seen.get(sanitized, 0) + 1
    return result


def schema_name_to_type_name(name: str) -> str:
    """Convert a schema name to a valid Go type name."""
    if name == "$":
        return "DollarSign"
    name = to_camel_case(name)
    if name and _is_digit(name[0]):
        name = "N" + name
    return name


def schema_has_additional_properties(schema: Mapping[str, Any]) -> bool:
    """Whether a schema explicitly allows additional properties.

    True when ``additionalProperties`` is ``true`` or is itself a schema.
    """
    value = schema.get("additionalProperties")
    return value is True or isinstance(value, Mapping)


def path_to_type_name(path: Iterable[str]) -> str:
    """Join a path of names into a Go type name, e.g. ``Object_Field``."""
    return "_".join(to_camel_case(part) for part in path)


def string_to_go_comment(text: str) -> str:
    """Render a possibly multi-line string as a Go line comment."""
    if not text or not text.strip():
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    commented = "\n".join(f"// {line}" for line in text.split("\n"))
    return commented.removesuffix("\n// ")


def escape_path_elements(path: str) -> str:
    """URL-escape each path element that is not a ``{param}``."""
    return "/".join(
        elem if elem.startswith("{") and elem.endswith("}") else quote_plus(elem, safe="")
        for elem in path.split("/")
    )