"""Reference resolution and allOf expansion over the model-definition table."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from swagger_report.parser.base import Schema

log = logging.getLogger(__name__)


@dataclass
class FieldSet:
    """The merged fields of a definition, in rendering order."""

    fields: dict[str, Schema] = field(default_factory=dict)
    required: set[str] = field(default_factory=set)

    def merge(self, properties: dict[str, Schema], required: Iterable[str]) -> None:
        # A field keeps the position of its first occurrence; a later part redefines it.
        self.fields.update(properties)
        self.required.update(required)

    def is_required(self, name: str) -> bool:
        return name in self.required


def resolve_name(ref: str) -> str:
    """Return the model name a reference points to (its last path segment)."""
    return ref.split("/")[-1]


def resolve_definition(ref: str, definitions: dict[str, Schema]) -> Schema | None:
    """Look up the definition behind *ref*, or None if the document lacks it."""
    name = resolve_name(ref)
    definition = definitions.get(name)
    if definition is None:
        log.debug("Unresolved reference %r (no definition named %r)", ref, name)
    return definition


def expand_composite(
    items: list[Schema],
    definitions: dict[str, Schema],
    visited: set[str] | None = None,
) -> FieldSet:
    """Merge the fields of every allOf part into one FieldSet.

    Referenced parts are expanded recursively, including their own allOf.
    Names already in *visited* are skipped, so cyclic inclusions terminate.
    """
    if visited is None:
        visited = set()

    merged = FieldSet()
    for item in items:
        if item.ref:
            name = resolve_name(item.ref)
            if name in visited:
                log.debug("Skipping %r: already expanded in this allOf chain", name)
                continue
            definition = resolve_definition(item.ref, definitions)
            if definition is None:
                continue
            visited.add(name)
            nested = definition_fields(definition, definitions, visited)
            merged.merge(nested.fields, nested.required)
        else:
            nested = expand_composite(item.all_of, definitions, visited)
            merged.merge(nested.fields, nested.required)
            merged.merge(item.properties, item.required)
    return merged


def definition_fields(
    definition: Schema,
    definitions: dict[str, Schema],
    visited: set[str] | None = None,
) -> FieldSet:
    """All fields of *definition*: its allOf parts first, then its own properties."""
    fields = expand_composite(definition.all_of, definitions, visited)
    fields.merge(definition.properties, definition.required)
    return fields


def named_fields(name: str, definitions: dict[str, Schema]) -> FieldSet:
    """Fields of the definition called *name*; a self-inclusion through allOf is ignored."""
    definition = definitions.get(name)
    if definition is None:
        return FieldSet()
    return definition_fields(definition, definitions, {name})
