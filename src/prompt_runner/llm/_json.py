from __future__ import annotations

import json
from typing import Any

from jsonschema import validate
from jsonschema.exceptions import ValidationError as _SchemaValidationError

from .errors import JsonParseError, SchemaValidationError


def parse_json(text: str) -> Any:
    """Parse JSON from a model response.

    Assumes the provider was instructed to return JSON only; prose or a
    markdown code fence around the object is a parse failure.
    """

    try:
        return json.loads(text)
    except Exception as e:  # noqa: BLE001
        raise JsonParseError(f"Failed to parse JSON: {e}") from e


def validate_json(instance: Any, schema: dict[str, Any]) -> None:
    try:
        validate(instance=instance, schema=schema)
    except _SchemaValidationError as e:
        path = "/".join(str(p) for p in e.absolute_path)
        where = f" at '{path}'" if path else ""
        raise SchemaValidationError(
            f"JSON schema validation failed{where}: {e.message}"
        ) from e


def describe_schema(schema: dict[str, Any]) -> str:
    """Render a schema as indented JSON for inclusion in a prompt."""

    return json.dumps(schema, indent=2, ensure_ascii=False)
