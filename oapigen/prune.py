"""Finding and removing components that nothing in a spec refers to.

A spec is the plain mapping produced by loading an OpenAPI 3 document
(for example with a YAML or JSON parser). Any mapping that carries a
``$ref`` key is a reference; everything else is an inline value.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "RefWrapper",
    "walk_spec",
    "find_component_refs",
    "remove_orphaned_components",
    "prune_unused_components",
]

_OPERATION_METHODS = (
    "connect",
    "delete",
    "get",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "trace",
)

# Component sections that are pruned; securitySchemes are referenced by
# name from security requirements rather than through $ref, so they stay.
_PRUNABLE_SECTIONS = (
    "schemas",
    "parameters",
    "requestBodies",
    "responses",
    "headers",
    "examples",
    "links",
    "callbacks",
)


@dataclass(frozen=True)
class RefWrapper:
    """One node met while walking a spec that may be a reference."""

    ref: str
    has_value: bool
    source_ref: Any = field(compare=False, hash=False, repr=False)


Visitor = Callable[[RefWrapper], bool]


def _values(container: Any) -> Iterable[Any]:
    if isinstance(container, Mapping):
        return container.values()
    if isinstance(container, list):
        return container
    return ()


def _enter(node: Any, visit: Visitor) -> bool:
    """Offer ``node`` to the visitor; return whether to walk its children."""
    if not isinstance(node, Mapping):
        return False
    ref = node.get("$ref") or ""
    has_value = not ref
    if not visit(RefWrapper(ref=ref, has_value=has_value, source_ref=node)):
        return False
    return has_value


def _walk_content(content: Any, visit: Visitor) -> None:
    for media_type in _values(content):
        if not isinstance(media_type, Mapping):
            continue
        _walk_schema(media_type.get("schema"), visit)
        for example in _values(media_type.get("examples")):
            _walk_example(example, visit)


def _walk_schema(node: Any, visit: Visitor) -> None:
    if not _enter(node, visit):
        return
    for key in ("oneOf", "anyOf", "allOf"):
        for child in _values(node.get(key)):
            _walk_schema(child, visit)
    _walk_schema(node.get("not"), visit)
    _walk_schema(node.get("items"), visit)
    for child in _values(node.get("properties")):
        _walk_schema(child, visit)
    _walk_schema(node.get("additionalProperties"), visit)


def _walk_parameter(node: Any, visit: Visitor) -> None:
    if not _enter(node, visit):
        return
    _walk_schema(node.get("schema"), visit)
    for example in _values(node.get("examples")):
        _walk_example(example, visit)
    _walk_content(node.get("content"), visit)


def _walk_request_body(node: Any, visit: Visitor) -> None:
    if not _enter(node, visit):
        return
    _walk_content(node.get("content"), visit)


def _walk_response(node: Any, visit: Visitor) -> None:
    if not _enter(node, visit):
        return
    for header in _values(node.get("headers")):
        _walk_header(header, visit)
    _walk_content(node.get("content"), visit)
    for link in _values(node.get("links")):
        _walk_link(link, visit)


def _walk_path_item(path_item: Any, visit: Visitor) -> None:
    if not isinstance(path_item, Mapping):
        return
    for parameter in _values(path_item.get("parameters")):
        _walk_parameter(parameter, visit)
    for method in _OPERATION_METHODS:
        _walk_operation(path_item.get(method), visit)


def _walk_callback(node: Any, visit: Visitor) -> None:
    if not _enter(node, visit):
        return
    for path_item in node.values():
        _walk_path_item(path_item, visit)


def _walk_header(node: Any, visit: Visitor) -> None:
    if not _enter(node, visit):
        return
    _walk_schema(node.get("schema"), visit)


def _walk_leaf(node: Any, visit: Visitor) -> None:
    # Security schemes, links and examples hold nothing that can be a $ref.
    _enter(node, visit)


_walk_security_scheme = _walk_leaf
_walk_link = _walk_leaf
_walk_example = _walk_leaf


def _walk_operation(operation: Any, visit: Visitor) -> None:
    if not isinstance(operation, Mapping):
        return
    for parameter in _values(operation.get("parameters")):
        _walk_parameter(parameter, visit)
    _walk_request_body(operation.get("requestBody"), visit)
    for response in _values(operation.get("responses")):
        _walk_response(response, visit)
    for callback in _values(operation.get("callbacks")):
        _walk_callback(callback, visit)


_COMPONENT_WALKERS: tuple[tuple[str, Callable[[Any, Visitor], None]], ...] = (
    ("schemas", _walk_schema),
    ("parameters", _walk_parameter),
    ("headers", _walk_header),
    ("requestBodies", _walk_request_body),
    ("responses", _walk_response),
    ("securitySchemes", _walk_security_scheme),
    ("examples", _walk_example),
    ("links", _walk_link),
    ("callbacks", _walk_callback),
)


def _walk_components(components: Any, visit: Visitor) -> None:
    if not isinstance(components, Mapping):
        return
    for section, walker in _COMPONENT_WALKERS:
        for node in _values(components.get(section)):
            walker(node, visit)


def walk_spec(spec: Mapping[str, Any] | None, visit: Visitor) -> None:
    """Walk every reference-capable node of ``spec``.

    ``visit`` receives a :class:`RefWrapper` for each node and returns
    whether the walk should descend into that node's children. References
    are never followed. Exceptions raised by ``visit`` propagate.
    """
    if spec is None:
        return
    for path_item in _values(spec.get("paths")):
        _walk_path_item(path_item, visit)
    _walk_components(spec.get("components"), visit)


def find_component_refs(spec: Mapping[str, Any] | None) -> list[str]:
    """Return every ``$ref`` value used in ``spec``, in walk order."""
    refs: list[str] = []

    def collect(wrapper: RefWrapper) -> bool:
        if wrapper.ref:
            refs.append(wrapper.ref)
            return False
        return True

    walk_spec(spec, collect)
    return refs


def remove_orphaned_components(
    spec: MutableMapping[str, Any], refs: Iterable[str]
) -> int:
    """Delete components not named in ``refs``; return how many went."""
    referenced = set(refs)
    components = spec.get("components")
    if not isinstance(components, MutableMapping):
        return 0
    removed = 0
    for section in _PRUNABLE_SECTIONS:
        entries = components.get(section)
        if not isinstance(entries, MutableMapping):
            continue
        for key in list(entries):
            if f"#/components/{section}/{key}" not in referenced:
                del entries[key]
                removed += 1
    return removed


def prune_unused_components(spec: MutableMapping[str, Any]) -> int:
    """Remove unreferenced components until none are left; return the total."""
    total = 0
    while True:
        removed = remove_orphaned_components(spec, find_component_refs(spec))
        if removed < 1:
            return total
        total += removed