"""Swagger 2.0 / OpenAPI 3.x document parser.

Reads a JSON or YAML document and validates it into the models in
``parser.base``. OpenAPI 3 request bodies and response content are
folded into the Swagger 2.0 shape the renderer works with.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from swagger_report.errors import DocumentError
from swagger_report.resolver import resolve_name
from .base import Document, Info, Operation, Schema

log = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
PREFERRED_MEDIA_TYPES = ("application/json", "multipart/form-data")


def load_document(file_path: Path) -> Document:
    """Read and parse an API document from *file_path*.

    I/O errors propagate unchanged; anything that is not a well-formed
    document raises DocumentError.
    """
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentError(f"{file_path}: not valid JSON or YAML: {e}") from e
    return parse_document(data)


def parse_document(data: Any) -> Document:
    """Validate an already-loaded mapping into a Document."""
    if not isinstance(data, dict):
        raise DocumentError("document root must be a mapping")

    paths = data.get("paths") or {}
    if not isinstance(paths, dict):
        raise DocumentError("'paths' must be a mapping of URL path to methods")

    components = data.get("components") or {}
    if not isinstance(components, dict):
        raise DocumentError("'components' must be a mapping")

    param_table = _table(data, components, "parameters")
    try:
        return Document(
            info=Info.model_validate(data.get("info") or {}),
            paths={str(path): _parse_path_item(path, item, param_table) for path, item in paths.items()},
            definitions={
                str(name): Schema.model_validate(schema or {})
                for name, schema in _table(data, components, "definitions", "schemas").items()
            },
        )
    except ValidationError as e:
        raise DocumentError(f"malformed document: {e}") from e


def _table(data: dict, components: dict, key: str, component_key: str | None = None) -> dict:
    """A named table from the Swagger 2.0 root, else from OpenAPI 3 ``components``."""
    table = data.get(key)
    if table is None:
        table = components.get(component_key or key)
    table = table or {}
    if not isinstance(table, dict):
        raise DocumentError(f"'{key}' must be a mapping of name to definition")
    return table


def _parse_path_item(path: str, item: Any, param_table: dict) -> dict[str, Operation]:
    if not isinstance(item, dict):
        raise DocumentError(f"path '{path}' must map HTTP methods to operations")

    shared = _resolve_parameters(item.get("parameters"), param_table, f"path '{path}'")
    operations = {}
    for method, operation in item.items():
        if str(method).lower() not in HTTP_METHODS:
            continue
        where = f"operation {str(method).upper()} {path}"
        if not isinstance(operation, dict):
            raise DocumentError(f"{where} must be a mapping")
        own = _resolve_parameters(operation.get("parameters"), param_table, where)
        operations[str(method)] = _parse_operation(operation, _merge_parameters(shared, own), where)
    return operations


def _resolve_parameters(params: Any, param_table: dict, where: str) -> list[dict]:
    """Replace ``$ref`` entries with the shared parameter they name.

    A reference to a parameter the document does not define is dropped.
    """
    if params is None:
        return []
    if not isinstance(params, list):
        raise DocumentError(f"{where}: 'parameters' must be a list")

    resolved = []
    for param in params:
        if not isinstance(param, dict):
            raise DocumentError(f"{where}: every parameter must be a mapping")
        if "$ref" in param:
            name = resolve_name(str(param["$ref"]))
            target = param_table.get(name)
            if target is None:
                log.debug("%s: unresolved parameter reference %r", where, param["$ref"])
                continue
            if not isinstance(target, dict):
                raise DocumentError(f"shared parameter '{name}' must be a mapping")
            param = target
        resolved.append(param)
    return resolved


def _merge_parameters(shared: list[dict], own: list[dict]) -> list[dict]:
    """Path-level parameters apply unless the operation redefines them (same name and location)."""
    own_keys = {(p.get("name"), p.get("in")) for p in own}
    merged = [p for p in shared if (p.get("name"), p.get("in")) not in own_keys]
    merged.extend(own)
    return merged


def _parse_operation(operation: dict, parameters: list[dict], where: str) -> Operation:
    data = dict(operation)
    data["parameters"] = parameters

    body = operation.get("requestBody")
    body_schema = _content_schema(body, f"{where} requestBody")
    if body_schema is not None:
        data["parameters"] = parameters + [{
            "name": "body",
            "in": "body",
            "required": body.get("required", False),
            "description": body.get("description", ""),
            "schema": body_schema,
        }]

    data["responses"] = _parse_responses(operation.get("responses") or {}, where)
    return Operation.model_validate(data)


def _parse_responses(responses: Any, where: str) -> dict:
    if not isinstance(responses, dict):
        raise DocumentError(f"{where}: 'responses' must map status codes to responses")

    result = {}
    for status_code, resp in responses.items():
        resp_where = f"{where} response {status_code}"
        if resp is None:
            resp = {}
        if not isinstance(resp, dict):
            raise DocumentError(f"{resp_where} must be a mapping")
        resp = dict(resp)
        if "schema" not in resp:
            schema = _content_schema(resp, resp_where)
            if schema is not None:
                resp["schema"] = schema
        result[str(status_code)] = resp
    return result


def _media_rank(media_type: str) -> int:
    if media_type in PREFERRED_MEDIA_TYPES:
        return PREFERRED_MEDIA_TYPES.index(media_type)
    return len(PREFERRED_MEDIA_TYPES)


def _content_schema(block: Any, where: str) -> dict | None:
    """The schema of the best media type in an OpenAPI 3 ``content`` map.

    JSON wins over multipart; any other media type is taken in document order.
    """
    if block is None:
        return None
    if not isinstance(block, dict):
        raise DocumentError(f"{where} must be a mapping")
    content = block.get("content") or {}
    if not isinstance(content, dict):
        raise DocumentError(f"{where}: 'content' must map media types to schemas")

    for media_type in sorted(content, key=_media_rank):
        media = content[media_type]
        if media is None:
            continue
        if not isinstance(media, dict):
            raise DocumentError(f"{where}: media type '{media_type}' must be a mapping")
        if media.get("schema") is not None:
            return media["schema"]
    return None
