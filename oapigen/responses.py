"""Helpers that render the response-handling parts of generated clients."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from typing import Any

from .names import sorted_keys, uppercase_first_character
from .schema import ResponseTypeDefinition

__all__ = [
    "gen_response_payload",
    "gen_response_type_name",
    "condition_of_response_name",
    "build_unmarshal_case",
    "gen_response_unmarshal",
    "to_string_array",
    "strip_new_lines",
]

# Prefixes that let case clauses be sorted from most to least specific.
PREFIX_MOST_SPECIFIC = "3"
PREFIX_LESS_SPECIFIC = "6"
PREFIX_LEAST_SPECIFIC = "9"

RESPONSE_TYPE_SUFFIX = "Response"
HEADER_CONTENT_TYPE = "Content-Type"

CONTENT_TYPES_JSON = ("application/json", "text/x-json")
CONTENT_TYPES_YAML = ("application/yaml", "application/x-yaml", "text/yaml", "text/x-yaml")
CONTENT_TYPES_XML = ("application/xml", "text/xml")

_DECODERS = (
    (CONTENT_TYPES_JSON, "json"),
    (CONTENT_TYPES_YAML, "yaml"),
    (CONTENT_TYPES_XML, "xml"),
)

_RANGE_NAMES = frozenset({"1XX", "2XX", "3XX", "4XX", "5XX"})


def gen_response_type_name(operation_id: str) -> str:
    """Name of the response type generated for ``operation_id``."""
    return f"{uppercase_first_character(operation_id)}{RESPONSE_TYPE_SUFFIX}"


def gen_response_payload(operation_id: str) -> str:
    """The response value returned at the end of a client request function."""
    return (
        f"&{gen_response_type_name(operation_id)}{{\n"
        "Body: bodyBytes,\n"
        "HTTPResponse: rsp,\n"
        "}"
    )


def condition_of_response_name(status_code_var: str, response_name: str) -> str:
    """The status-code comparison matching a response name."""
    if response_name == "default":
        return "true"
    if response_name in _RANGE_NAMES:
        return f"{status_code_var} / 100 == {response_name[0]}"
    return f"{status_code_var} == {response_name}"


def build_unmarshal_case(
    type_definition: ResponseTypeDefinition, case_action: str, content_type: str
) -> tuple[str, str]:
    """Return the sort key and the case clause unmarshalling one content type."""
    case_key = f"{PREFIX_LEAST_SPECIFIC}.{content_type}.{type_definition.response_name}"
    condition = condition_of_response_name("rsp.StatusCode", type_definition.response_name)
    case_clause = (
        f'case strings.Contains(rsp.Header.Get("{HEADER_CONTENT_TYPE}"), "{content_type}")'
        f" && {condition}:\n{case_action}\n"
    )
    return case_key, case_clause


def _unhandled_clause(response_name: str, action: str) -> tuple[str, str]:
    clause_key = "case " + condition_of_response_name("rsp.StatusCode", response_name) + ":"
    return PREFIX_LEAST_SPECIFIC + clause_key, f"{clause_key}\n{action}\n"


def _decoder_for(content_type: str) -> str | None:
    for content_types, decoder in _DECODERS:
        if content_type in content_types:
            return decoder
    return None


def gen_response_unmarshal(
    operation_id: str,
    responses: Mapping[str, Any],
    type_definitions: Iterable[ResponseTypeDefinition],
) -> str:
    """Render the switch statement that unmarshals an operation's responses.

    ``responses`` maps response names (status codes, ranges or ``default``)
    to response objects; ``type_definitions`` are the response types of the
    operation. Clauses that decode a body come before the others.
    """
    handled: dict[str, str] = {}
    unhandled: dict[str, str] = {}

    for type_def in type_definitions:
        if type_def.response_name not in responses:
            continue
        response = responses[type_def.response_name]
        if response is None:
            print(
                f"Response {operation_id}.{type_def.response_name} has nil value",
                file=sys.stderr,
            )
            continue

        content = response.get("content") or {}
        if not content:
            key, clause = _unhandled_clause(type_def.response_name, "break // No content-type")
            unhandled[key] = clause
            continue

        for content_type in sorted_keys(content):
            if type_def.type_name == "interface{}":
                continue
            decoder = _decoder_for(content_type)
            if decoder is None:
                key, clause = _unhandled_clause(
                    type_def.response_name, f"// Content-type ({content_type}) unsupported"
                )
                unhandled[key] = clause
                continue
            if type_def.content_type_name != content_type:
                continue
            action = (
                f"var dest {type_def.schema.type_decl()}\n"
                f"if err := {decoder}.Unmarshal(bodyBytes, &dest); err != nil {{ \n"
                " return nil, err \n"
                "}\n"
                f"response.{type_def.type_name} = &dest"
            )
            key, clause = build_unmarshal_case(type_def, action, decoder)
            handled[key] = clause

    lines = ["switch {\n"]
    lines.extend(f"{handled[key]}\n" for key in sorted_keys(handled))
    lines.extend(f"{unhandled[key]}\n" for key in sorted_keys(unhandled))
    lines.append("}\n")
    return "".join(lines)


def to_string_array(values: Iterable[str]) -> str:
    """Render ``values`` as a Go string slice literal."""
    return '[]string{"' + '","'.join(values) + '"}'


def strip_new_lines(text: str) -> str:
    """Remove every newline from ``text``."""
    return text.replace("\n", "")