"""Markdown report renderer.

Walks a parsed Document top-down and writes one section per endpoint:
title block, request parameter table and response structure tables.
Referenced models are expanded inline, recursively, with a cycle guard.
"""

import logging

from swagger_report.config import ReportConfig
from swagger_report.parser.base import Document, Endpoint, Parameter, Schema, SchemaKind
from swagger_report.resolver import (
    FieldSet,
    definition_fields,
    named_fields,
    resolve_definition,
    resolve_name,
)

log = logging.getLogger(__name__)

PARAM_TABLE_HEADER = "| Name | Type | Required | Description |\n|------|------|----------|-------------|\n"
FIELD_TABLE_HEADER = "| Field | Type | Description |\n|-------|------|-------------|\n"
SEPARATOR = "\n---\n"


def property_type(prop: Schema) -> str:
    """Type label for a field, e.g. ``User``, ``[]User``, ``string (date-time)``."""
    if prop.ref:
        return resolve_name(prop.ref)
    if prop.type == "array" and prop.items is not None:
        return "[]" + _element_type(prop.items)
    if prop.format:
        return f"{prop.type} ({prop.format})"
    if prop.properties:
        return "object"
    if prop.all_of:
        return "object (composite)"
    return prop.type


def param_type(param: Parameter) -> str:
    """Type label for a parameter row; body schemas take precedence over ``type``."""
    schema = param.schema_
    if schema is not None and not schema.is_empty():
        return property_type(schema)
    if param.type == "array" and param.items is not None:
        return "[]" + _element_type(param.items)
    if param.format:
        return f"{param.type} ({param.format})"
    return param.type


def _element_type(items: Schema) -> str:
    if items.ref:
        return resolve_name(items.ref)
    if items.kind == SchemaKind.ARRAY:
        return "[]" + _element_type(items.items)
    if items.properties or items.all_of:
        return items.type or "object"
    return items.type


def order_endpoints(endpoints: list[Endpoint], config: ReportConfig) -> list[Endpoint]:
    """Prioritized paths first (ascending), then the rest by path.

    Ties keep document order.
    """
    def key(endpoint: Endpoint) -> tuple:
        priority = config.priority(endpoint.path)
        if priority is not None:
            return (0, priority, "")
        return (1, 0, endpoint.path)

    return sorted(endpoints, key=key)


def _status_key(code: str) -> tuple:
    if code.isdigit():
        return (0, int(code), "")
    return (1, 0, code)


def _cell(text: str) -> str:
    """Make *text* safe inside a Markdown table cell."""
    return " ".join(str(text).split()).replace("|", "\\|")


class MarkdownRenderer:
    """Renders a Document into a Markdown report."""

    def __init__(self, document: Document, config: ReportConfig | None = None):
        self.document = document
        self.config = config or ReportConfig()
        self.definitions = document.definitions
        self._parts: list[str] = []

    def render(self) -> str:
        """Render the whole report and return it as a string."""
        self._parts = []
        endpoints = order_endpoints(self.document.endpoints(), self.config)
        self._write_header(endpoints)
        self._write("\n## Endpoints\n")
        for endpoint in endpoints:
            self._write_endpoint(endpoint)
        log.debug("Rendered %d endpoints", len(endpoints))
        return "".join(self._parts)

    def _write(self, text: str) -> None:
        self._parts.append(text)

    # -- document level -------------------------------------------------------

    def _write_header(self, endpoints: list[Endpoint]) -> None:
        info = self.document.info
        self._write(f"# {info.title}\n\n")
        self._write(f"**Version**: {info.version}  \n")
        self._write(f"**Description**: {info.description}\n")
        self._write("\n## Overview\n\n")
        if not endpoints:
            return
        self._write("| Method | Path | Summary |\n|--------|------|---------|\n")
        for ep in endpoints:
            self._write(f"| `{ep.method.upper()}` | `{ep.path}` | {_cell(ep.operation.summary)} |\n")

    def _write_endpoint(self, endpoint: Endpoint) -> None:
        op = endpoint.operation
        method = endpoint.method.upper()
        title = op.summary or f"{method} {endpoint.path}"

        self._write(f"\n### {title}\n\n")
        self._write(f"**Path**: `{endpoint.path}`  \n")
        self._write(f"**Method**: `{method}`  \n")
        if op.description.strip():
            self._write(f"**Description**: {op.description}  \n")
        if op.tags:
            self._write(f"**Tags**: {', '.join(op.tags)}  \n")

        if op.parameters:
            self._write_parameters(op.parameters)

        for code in sorted(op.responses, key=_status_key):
            schema = op.responses[code].schema_
            if schema is None or schema.is_empty():
                continue
            self._write(f"\n**Response structure** (`{code}`):\n\n")
            self._write_schema(schema, ())
        self._write(SEPARATOR)

    # -- request parameters ---------------------------------------------------

    def _write_parameters(self, parameters: list[Parameter]) -> None:
        self._write("\n**Request parameters**:\n\n")
        self._write(PARAM_TABLE_HEADER)
        for param in parameters:
            schema = param.schema_
            if schema is not None and schema.ref:
                if resolve_definition(schema.ref, self.definitions) is None:
                    continue
                self._write_field_rows(named_fields(resolve_name(schema.ref), self.definitions))
                continue
            if schema is not None and schema.kind in (SchemaKind.OBJECT, SchemaKind.COMPOSITE):
                self._write_field_rows(definition_fields(schema, self.definitions))
                continue

            if not param.name or self.config.is_ignored(param.name):
                continue
            required = "yes" if param.required else "no"
            self._write(f"| {_cell(param.name)} | `{param_type(param)}` | {required} | {_cell(param.description)} |\n")
        self._write("\n")

    def _write_field_rows(self, fields: FieldSet) -> None:
        for name, prop in fields.fields.items():
            if self.config.is_ignored(name):
                continue
            required = "yes" if fields.is_required(name) else "no"
            self._write(f"| {_cell(name)} | `{property_type(prop)}` | {required} | {_cell(prop.description)} |\n")

    # -- response schemas -----------------------------------------------------
    #
    # ``trail`` holds the ids of the schema nodes whose field tables are being
    # written on the current path. Re-entering one of them is a cycle.

    def _write_schema(self, schema: Schema, trail: tuple[int, ...]) -> None:
        if schema.ref:
            self._write_definition(resolve_name(schema.ref), trail)
            return

        if schema.kind in (SchemaKind.OBJECT, SchemaKind.COMPOSITE):
            self._write_inline(schema, "object", trail)
            return

        if schema.kind == SchemaKind.ARRAY:
            items = schema.items
            self._write(f"Array type: `[]{_element_type(items)}`\n\n")
            self._write_element(items, "array element", trail, "**Array element structure**:\n\n")
            return

        if schema.type:
            self._write(f"`{schema.type}`\n")

    def _write_definition(self, name: str, trail: tuple[int, ...], heading: str = "") -> None:
        """Write the field table of definition *name* and everything nested below it."""
        definition = self.definitions.get(name)
        if definition is None:
            log.debug("Omitting unresolved definition %r", name)
            return
        if id(definition) in trail:
            self._write_circular(name, heading)
            return
        self._write_fields(named_fields(name, self.definitions), trail + (id(definition),), heading)

    def _write_inline(self, schema: Schema, label: str, trail: tuple[int, ...], heading: str = "") -> None:
        """Write an anonymous object or allOf schema as one merged field table."""
        if id(schema) in trail:
            self._write_circular(label, heading)
            return
        self._write_fields(definition_fields(schema, self.definitions), trail + (id(schema),), heading)

    def _write_element(self, items: Schema, label: str, trail: tuple[int, ...], heading: str) -> None:
        while items.kind == SchemaKind.ARRAY:
            items = items.items
        if items.ref:
            self._write_definition(resolve_name(items.ref), trail, heading)
        elif items.properties or items.all_of:
            self._write_inline(items, label, trail, heading)

    def _write_circular(self, label: str, heading: str) -> None:
        self._write(heading)
        self._write(f"*(circular reference to `{label}`, not expanded)*\n\n")

    def _write_fields(self, fields: FieldSet, trail: tuple[int, ...], heading: str = "") -> None:
        rows = [(name, prop) for name, prop in fields.fields.items() if not self.config.is_ignored(name)]
        if not rows:
            return

        self._write(heading)
        self._write(FIELD_TABLE_HEADER)
        for name, prop in rows:
            self._write(f"| {_cell(name)} | `{property_type(prop)}` | {_cell(prop.description)} |\n")
        self._write("\n")

        for name, prop in rows:
            self._write_nested(name, prop, trail)

    def _write_nested(self, name: str, prop: Schema, trail: tuple[int, ...]) -> None:
        """Expand a field that is itself a reference, array of models, object or allOf."""
        if prop.kind == SchemaKind.REFERENCE:
            self._write_definition(resolve_name(prop.ref), trail, f"**{name} structure**:\n\n")
        elif prop.kind == SchemaKind.ARRAY:
            self._write_element(prop.items, name, trail, f"**{name} array element structure**:\n\n")
        elif prop.kind in (SchemaKind.OBJECT, SchemaKind.COMPOSITE):
            self._write_inline(prop, name, trail, f"**{name} structure**:\n\n")


def render_markdown(document: Document, config: ReportConfig | None = None) -> str:
    """Render *document* as a Markdown report."""
    return MarkdownRenderer(document, config).render()
