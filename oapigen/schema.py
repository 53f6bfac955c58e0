"""Turning OpenAPI schema objects into Go type descriptions.

Schemas are the plain mappings produced by loading an OpenAPI 3 document.
A mapping with a ``$ref`` key is a reference and is never dereferenced:
the referenced type name is used instead.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .names import (
    is_type_reference,
    path_to_type_name,
    ref_path_to_type,
    sanitize_enum_names,
    schema_has_additional_properties,
    schema_name_to_type_name,
    sorted_keys,
    string_to_go_comment,
    to_camel_case,
)

__all__ = [
    "SchemaError",
    "Schema",
    "Property",
    "EnumDefinition",
    "TypeDefinition",
    "ResponseTypeDefinition",
    "properties_equal",
    "generate_go_schema",
    "gen_fields_from_properties",
    "gen_struct_from_schema",
    "merge_schemas",
    "gen_struct_from_all_of",
    "param_to_go_type",
]

EXT_GO_TYPE = "x-go-type"
EXT_OMIT_EMPTY = "x-omitempty"

_INTEGER_FORMATS = {
    "int64": "int64",
    "int32": "int32",
    "int16": "int16",
    "int8": "int8",
    "int": "int",
    "uint64": "uint64",
    "uint32": "uint32",
    "uint16": "uint16",
    "uint8": "uint8",
    "uint": "uint",
    "": "int",
}

_NUMBER_FORMATS = {"double": "float64", "float": "float32", "": "float32"}

_STRING_FORMATS = {
    "byte": "[]byte",
    "email": "openapi_types.Email",
    "date": "openapi_types.Date",
    "date-time": "time.Time",
    "json": "json.RawMessage",
}


class SchemaError(ValueError):
    """Raised when a schema cannot be turned into a Go type."""


@dataclass
class Schema:
    """A type definition derived from an OpenAPI schema."""

    go_type: str = ""
    ref_type: str = ""
    array_type: Schema | None = None
    enum_values: dict[str, str] = field(default_factory=dict)
    properties: list[Property] = field(default_factory=list)
    has_additional_properties: bool = False
    additional_properties_type: Schema | None = None
    additional_types: list[TypeDefinition] = field(default_factory=list)
    skip_optional_pointer: bool = False
    description: str = ""

    def is_ref(self) -> bool:
        """Whether the schema carries a named type."""
        return self.ref_type != ""

    def type_decl(self) -> str:
        """The type used when declaring a value of this schema."""
        return self.ref_type if self.is_ref() else self.go_type

    def merge_property(self, prop: Property) -> None:
        """Append ``prop``, refusing a same-named property of another type."""
        for existing in self.properties:
            if existing.json_field_name == prop.json_field_name and not properties_equal(
                existing, prop
            ):
                raise SchemaError(
                    f"property '{existing.json_field_name}' already exists with a different type"
                )
        self.properties.append(prop)

    def additional_type_defs(self) -> list[TypeDefinition]:
        """Helper types needed by this schema and its properties."""
        result: list[TypeDefinition] = []
        for prop in self.properties:
            result.extend(prop.schema.additional_type_defs())
        result.extend(self.additional_types)
        return result


@dataclass
class Property:
    """A named field of an object schema."""

    json_field_name: str
    schema: Schema
    required: bool = False
    nullable: bool = False
    description: str = ""
    extensions: dict[str, Any] = field(default_factory=dict)

    def go_field_name(self) -> str:
        """The Go field name for this property."""
        return schema_name_to_type_name(self.json_field_name)

    def go_type_def(self) -> str:
        """The field type, a pointer when optional or nullable."""
        type_def = self.schema.type_decl()
        if not self.schema.skip_optional_pointer and (not self.required or self.nullable):
            type_def = "*" + type_def
        return type_def


@dataclass
class EnumDefinition:
    """Type information for an enum."""

    schema: Schema
    type_name: str
    value_wrapper: str


@dataclass
class TypeDefinition:
    """A Go type definition in generated code."""

    type_name: str
    json_name: str
    schema: Schema

    def can_alias(self) -> bool:
        """Whether the type is a reference, or an array of one."""
        return self.schema.is_ref() or (
            self.schema.array_type is not None and self.schema.array_type.is_ref()
        )


@dataclass
class ResponseTypeDefinition(TypeDefinition):
    """A type definition used to unmarshal one response content type."""

    content_type_name: str = ""
    response_name: str = ""


def properties_equal(a: Property, b: Property) -> bool:
    """Whether two properties have the same name, type and requiredness."""
    return (
        a.json_field_name == b.json_field_name
        and a.schema.type_decl() == b.schema.type_decl()
        and a.required == b.required
    )


def _extensions(node: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in node.items() if str(key).startswith("x-")}


def _format_enum_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def _ref_type(ref: str, import_mapping: Mapping[str, str] | None) -> str:
    try:
        return ref_path_to_type(ref, import_mapping)
    except ValueError as err:
        raise SchemaError(f"error turning reference ({ref}) into a Go type: {err}") from err


def _json_name(path: Sequence[str]) -> str:
    return ".".join(to_camel_case(part) for part in path)


def generate_go_schema(
    schema_ref: Mapping[str, Any] | None,
    path: Sequence[str],
    import_mapping: Mapping[str, str] | None = None,
) -> Schema:
    """Build the :class:`Schema` describing ``schema_ref``.

    ``path`` names the chain of schema and property names that led here; it
    is used to name helper types. Raises :class:`SchemaError`.
    """
    if schema_ref is None:
        return Schema(go_type="interface{}")

    path = list(path)
    schema = schema_ref
    description = string_to_go_comment(str(schema.get("description") or ""))
    ref = schema.get("$ref") or ""

    if is_type_reference(ref):
        return Schema(go_type=_ref_type(ref, import_mapping), description=description)

    out = Schema(description=description)

    if schema.get("anyOf") is not None or schema.get("oneOf") is not None:
        out.go_type = "interface{}"
        return out

    all_of = schema.get("allOf")
    if all_of is not None:
        try:
            return merge_schemas(all_of, path, import_mapping)
        except SchemaError as err:
            raise SchemaError(f"error merging schemas: {err}") from err

    if EXT_GO_TYPE in schema:
        type_name = schema[EXT_GO_TYPE]
        if not isinstance(type_name, str):
            raise SchemaError(f'invalid value for "{EXT_GO_TYPE}": expected a string')
        out.go_type = type_name
        return out

    kind = schema.get("type") or ""
    if kind in ("", "object"):
        _build_object(schema, kind, path, out, import_mapping)
        return out

    try:
        _resolve_type(schema, path, out, import_mapping)
    except SchemaError as err:
        raise SchemaError(f"error resolving primitive type: {err}") from err

    enum = schema.get("enum") or []
    if enum:
        _apply_enum(enum, path, out)
    return out


def _build_object(
    schema: Mapping[str, Any],
    kind: str,
    path: list[str],
    out: Schema,
    import_mapping: Mapping[str, str] | None,
) -> None:
    properties = schema.get("properties") or {}
    has_additional = schema_has_additional_properties(schema)

    if not properties and not has_additional:
        out.go_type = "map[string]interface{}" if kind == "object" else "interface{}"
        return

    required = schema.get("required") or []
    for name in sorted_keys(properties):
        node = properties[name]
        property_path = [*path, name]
        try:
            prop_schema = generate_go_schema(node, property_path, import_mapping)
        except SchemaError as err:
            raise SchemaError(
                f"error generating Go schema for property '{name}': {err}"
            ) from err

        if prop_schema.has_additional_properties and not prop_schema.ref_type:
            type_name = path_to_type_name(property_path)
            type_def = TypeDefinition(
                type_name=type_name,
                json_name=_json_name(property_path),
                schema=dataclasses.replace(
                    prop_schema, additional_types=list(prop_schema.additional_types)
                ),
            )
            prop_schema.additional_types.append(type_def)
            prop_schema.ref_type = type_name

        node = node or {}
        out.properties.append(
            Property(
                json_field_name=name,
                schema=prop_schema,
                required=name in required,
                nullable=bool(node.get("nullable", False)),
                description=str(node.get("description") or ""),
                extensions=_extensions(node),
            )
        )

    out.has_additional_properties = has_additional
    out.additional_properties_type = Schema(go_type="interface{}")
    additional = schema.get("additionalProperties")
    if isinstance(additional, Mapping):
        try:
            out.additional_properties_type = generate_go_schema(
                additional, path, import_mapping
            )
        except SchemaError as err:
            raise SchemaError(
                f"error generating type for additional properties: {err}"
            ) from err

    out.go_type = gen_struct_from_schema(out)


def _apply_enum(enum: Iterable[Any], path: list[str], out: Schema) -> None:
    values = [_format_enum_value(value) for value in enum]
    for name, value in sanitize_enum_names(values).items():
        const_path = [*path, "Empty" if value == "" else name]
        out.enum_values[schema_name_to_type_name(path_to_type_name(const_path))] = value

    if len(path) > 1:
        type_name = schema_name_to_type_name(path_to_type_name(path))
        type_def = TypeDefinition(
            type_name=type_name,
            json_name=_json_name(path),
            schema=dataclasses.replace(out, additional_types=list(out.additional_types)),
        )
        out.additional_types.append(type_def)
        out.ref_type = type_name


def _resolve_type(
    schema: Mapping[str, Any],
    path: list[str],
    out: Schema,
    import_mapping: Mapping[str, str] | None,
) -> None:
    fmt = schema.get("format") or ""
    kind = schema.get("type") or ""

    if kind == "array":
        try:
            array_type = generate_go_schema(schema.get("items"), path, import_mapping)
        except SchemaError as err:
            raise SchemaError(f"error generating type for array: {err}") from err
        out.array_type = array_type
        out.go_type = "[]" + array_type.type_decl()
        out.additional_types.extend(array_type.additional_type_defs())
        out.properties = array_type.properties
    elif kind == "integer":
        if fmt not in _INTEGER_FORMATS:
            raise SchemaError(f"invalid integer format: {fmt}")
        out.go_type = _INTEGER_FORMATS[fmt]
    elif kind == "number":
        if fmt not in _NUMBER_FORMATS:
            raise SchemaError(f"invalid number format: {fmt}")
        out.go_type = _NUMBER_FORMATS[fmt]
    elif kind == "boolean":
        if fmt:
            raise SchemaError(f"invalid format ({fmt}) for boolean")
        out.go_type = "bool"
    elif kind == "string":
        out.go_type = _STRING_FORMATS.get(fmt, "string")
        if fmt == "json":
            out.skip_optional_pointer = True
    else:
        raise SchemaError(f"unhandled Schema type: {kind}")


def _omit_empty(prop: Property) -> bool:
    value = prop.extensions.get(EXT_OMIT_EMPTY)
    return value if isinstance(value, bool) else True


def gen_fields_from_properties(props: Iterable[Property]) -> list[str]:
    """Render struct field lines, with JSON tags, for ``props``."""
    fields: list[str] = []
    for prop in props:
        text = ""
        if prop.description:
            text += f"\n{string_to_go_comment(prop.description)}\n"
        text += f"    {prop.go_field_name()} {prop.go_type_def()}"
        if prop.required or prop.nullable or not _omit_empty(prop):
            text += f' `json:"{prop.json_field_name}"`'
        else:
            text += f' `json:"{prop.json_field_name},omitempty"`'
        fields.append(text)
    return fields


def _additional_properties_line(schema: Schema) -> str:
    add_type = schema.additional_properties_type or Schema(go_type="interface{}")
    type_name = add_type.ref_type or add_type.go_type
    return f'AdditionalProperties map[string]{type_name} `json:"-"`'


def gen_struct_from_schema(schema: Schema) -> str:
    """Render the Go struct type for an object schema."""
    parts = ["struct {", *gen_fields_from_properties(schema.properties)]
    if schema.has_additional_properties:
        parts.append(_additional_properties_line(schema))
    parts.append("}")
    return "\n".join(parts)


def merge_schemas(
    all_of: Iterable[Mapping[str, Any]],
    path: Sequence[str],
    import_mapping: Mapping[str, str] | None = None,
) -> Schema:
    """Merge the fields of every schema in ``all_of`` into one schema."""
    all_of = list(all_of)
    out = Schema()
    for item in all_of:
        ref = item.get("$ref") or ""
        ref_type = _ref_type(ref, import_mapping) if is_type_reference(ref) else ""

        try:
            schema = generate_go_schema(item, path, import_mapping)
        except SchemaError as err:
            raise SchemaError(f"error generating Go schema in allOf: {err}") from err
        schema.ref_type = ref_type

        for prop in schema.properties:
            try:
                out.merge_property(prop)
            except SchemaError as err:
                raise SchemaError(f"error merging properties: {err}") from err

        if schema.has_additional_properties:
            if out.has_additional_properties:
                if (
                    schema.additional_properties_type.type_decl()
                    != out.additional_properties_type.type_decl()
                ):
                    raise SchemaError(
                        "additional properties in allOf have incompatible types"
                    )
            else:
                out.has_additional_properties = True
                out.additional_properties_type = schema.additional_properties_type

    try:
        out.go_type = gen_struct_from_all_of(all_of, path, import_mapping)
    except SchemaError as err:
        raise SchemaError(f"unable to generate aggregate type for AllOf: {err}") from err
    return out


def gen_struct_from_all_of(
    all_of: Iterable[Mapping[str, Any]],
    path: Sequence[str],
    import_mapping: Mapping[str, str] | None = None,
) -> str:
    """Render a struct joining ``all_of``: references embedded, others inlined."""
    parts = ["struct {"]
    for item in all_of:
        ref = item.get("$ref") or ""
        if is_type_reference(ref):
            go_type = _ref_type(ref, import_mapping)
            parts.append(f"   // Embedded struct due to allOf({ref})")
            parts.append(f'   {go_type} `yaml:",inline"`')
            continue
        schema = generate_go_schema(item, path, import_mapping)
        parts.append("   // Embedded fields due to inline allOf schema")
        parts.extend(gen_fields_from_properties(schema.properties))
        if schema.has_additional_properties:
            line = _additional_properties_line(schema)
            if line not in parts:
                parts.append(line)
    parts.append("}")
    return "\n".join(parts)


def param_to_go_type(
    param: Mapping[str, Any],
    path: Sequence[str],
    import_mapping: Mapping[str, str] | None = None,
) -> Schema:
    """Build the Go type for a parameter from its schema or its content."""
    content = param.get("content")
    schema = param.get("schema")
    if content is None and schema is None:
        raise SchemaError(f"parameter '{param.get('name', '')}' has no schema or content")

    if schema is not None:
        return generate_go_schema(schema, path, import_mapping)

    description = string_to_go_comment(str(param.get("description") or ""))
    if len(content) > 1 or "application/json" not in content:
        return Schema(go_type="string", description=description)

    media_type = content["application/json"] or {}
    return generate_go_schema(media_type.get("schema"), path, import_mapping)