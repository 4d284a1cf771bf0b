"""Data models for a parsed Swagger / OpenAPI document.

The loaded JSON/YAML mapping is validated straight into these models,
so the renderer never inspects raw dictionaries.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SchemaKind(str, Enum):
    REFERENCE = "reference"
    ARRAY = "array"
    OBJECT = "object"
    COMPOSITE = "composite"
    PRIMITIVE = "primitive"


class _DocumentNode(BaseModel):
    """Base for models read from the document: unknown keys are ignored,
    scalar numbers are accepted as text and explicit nulls count as absent.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Schema(_DocumentNode):
    """A schema node: model definition, property, array item or allOf part."""

    ref: str = Field(default="", alias="$ref")
    type: str = ""
    format: str = ""
    description: str = ""
    items: "Schema | None" = None
    properties: dict[str, "Schema"] = {}
    required: list[str] = []
    all_of: list["Schema"] = Field(default=[], alias="allOf")
    kind: SchemaKind = SchemaKind.PRIMITIVE

    @model_validator(mode="after")
    def _classify(self) -> "Schema":
        if self.ref:
            kind = SchemaKind.REFERENCE
        elif self.type == "array" and self.items is not None:
            kind = SchemaKind.ARRAY
        elif self.properties:
            kind = SchemaKind.OBJECT
        elif self.all_of:
            kind = SchemaKind.COMPOSITE
        else:
            kind = SchemaKind.PRIMITIVE
        self.kind = kind
        return self

    def is_empty(self) -> bool:
        """True when there is nothing to render for this schema."""
        return not (self.ref or self.type or self.all_of or self.properties)


Schema.model_rebuild()


class Parameter(_DocumentNode):
    """A single operation parameter (body, query, path, header or formData)."""

    name: str = ""
    location: str = Field(default="query", alias="in")  # body / query / path / header
    description: str = ""
    required: bool = False
    type: str = ""
    format: str = ""
    items: Schema | None = None
    schema_: Schema | None = Field(default=None, alias="schema")


class Response(_DocumentNode):
    description: str = ""
    schema_: Schema | None = Field(default=None, alias="schema")


class Operation(_DocumentNode):
    """One HTTP method on one path."""

    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = []
    responses: dict[str, Response] = {}
    tags: list[str] = []


class Info(_DocumentNode):
    title: str = ""
    version: str = ""
    description: str = ""


class Endpoint(BaseModel):
    """A (path, method, operation) triple taken from the paths table."""

    path: str
    method: str
    operation: Operation


class Document(BaseModel):
    """The whole API description being converted."""

    model_config = ConfigDict(frozen=True)

    info: Info = Info()
    paths: dict[str, dict[str, Operation]] = {}
    definitions: dict[str, Schema] = {}

    def endpoints(self) -> list[Endpoint]:
        """Flatten the path -> method -> operation table."""
        return [
            Endpoint(path=path, method=method, operation=operation)
            for path, methods in self.paths.items()
            for method, operation in methods.items()
        ]
