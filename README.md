# oapigen

Building blocks for turning an OpenAPI 3 specification into Go type
declarations and client response handling code. A specification is handled
as the plain Python mapping you get from loading the document with a YAML or
JSON parser; any mapping with a `$ref` key is treated as a reference.

## Installation

    pip install .

For running the tests (they use pytest and PyYAML):

    pip install ".[test]"
    pytest

The package itself has no dependencies beyond the standard library.

## Modules

### `oapigen.names`

Name, reference and path helpers:

- `to_camel_case`, `uppercase_first_character`, `lowercase_first_character`,
  `schema_name_to_type_name`, `path_to_type_name`
- `ref_path_to_type(ref_path, import_mapping)` – `#/components/schemas/Foo`
  becomes `Foo`; `doc.yaml#/components/schemas/Foo` becomes `pkg.Foo` when
  `import_mapping` maps `doc.yaml` to `pkg`. Unsupported or unmapped
  references raise `ValueError`.
- `is_type_reference`, `is_whole_document_reference`
- `swagger_uri_to_echo_uri` (`/p/{id}` → `/p/:id`), `swagger_uri_to_chi_uri`
  (`/p/{.id*}` → `/p/{id}`), `ordered_params_from_uri`,
  `replace_path_params_with_str`, `escape_path_elements`
- `is_go_keyword`, `is_predeclared_go_identifier`, `is_go_identity`,
  `is_valid_go_identity`, `sanitize_go_identity`, `sanitize_enum_names`
- `schema_has_additional_properties`, `string_to_go_comment`, `sorted_keys`

### `oapigen.prune`

- `walk_spec(spec, visit)` – calls `visit` with a `RefWrapper` (`ref`,
  `has_value`, `source_ref`) for every node that may be a reference, and
  descends into a node only when `visit` returns true. References are never
  followed.
- `find_component_refs(spec)` – every `$ref` value in walk order.
- `remove_orphaned_components(spec, refs)` – deletes unreferenced schemas,
  parameters, request bodies, responses, headers, examples, links and
  callbacks, returning how many were removed. Security schemes are kept,
  since they are referenced by name.
- `prune_unused_components(spec)` – repeats the above until nothing more is
  removed and returns the total.

### `oapigen.schema`

- `generate_go_schema(schema_ref, path, import_mapping)` returns a `Schema`
  (`go_type`, `ref_type`, `properties`, `enum_values`, `additional_types`,
  ...); `type_decl()` gives the type to declare values with.
- `merge_schemas` and `gen_struct_from_all_of` handle `allOf`;
  `gen_struct_from_schema` and `gen_fields_from_properties` render struct
  bodies with JSON tags (honouring `x-omitempty`); `x-go-type` overrides the
  type.
- `param_to_go_type(param, path, import_mapping)` types a parameter from its
  schema or its `application/json` content.
- Data classes `Property`, `TypeDefinition`, `ResponseTypeDefinition`,
  `EnumDefinition`; unsupported input raises `SchemaError` (a `ValueError`).

### `oapigen.responses`

- `gen_response_type_name`, `gen_response_payload`
- `condition_of_response_name` – `default` → `true`, `2XX` →
  `rsp.StatusCode / 100 == 2`, `404` → `rsp.StatusCode == 404`
- `build_unmarshal_case`, `gen_response_unmarshal(operation_id, responses,
  type_definitions)` – the `switch` that decodes JSON, YAML or XML bodies,
  decoding clauses first. A response whose value is `None` is reported on
  standard error and skipped.
- `to_string_array`, `strip_new_lines`

## Example

```python
import json

from oapigen.names import to_camel_case, swagger_uri_to_chi_uri
from oapigen.prune import prune_unused_components
from oapigen.schema import generate_go_schema

print(to_camel_case("number-1234"))              # Number1234
print(swagger_uri_to_chi_uri("/pets/{.id*}"))    # /pets/{id}

with open("spec.json") as fh:
    spec = json.load(fh)

removed = prune_unused_components(spec)

pet = generate_go_schema(spec["components"]["schemas"]["Pet"], ["Pet"], {})
print(pet.type_decl())
```

## What it does not do

This is a library of pieces, not a complete generator. It has no command
line tool, does not load or resolve documents (references are kept as type
names, never dereferenced), does not write whole Go source files or
templates for servers and clients, and does not validate HTTP requests
against a specification.