"""
JSON Schema checks for `$$jsonresponse` sections.

Validates schema text against the JSON Schema meta-schema, resolves local
`$ref` pointers and converts Pydantic models to schema text.
"""

import json
import logging
from typing import Any, Iterator, Optional, Type

from jsonschema.validators import validator_for
from pydantic import BaseModel
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from .types import Failure, Result, Success

logger = logging.getLogger(__name__)

_SCHEMA_URI = "urn:promptfile:jsonresponse"

# Keywords whose values are instance data, not subschemas
_DATA_KEYWORDS = ("const", "default", "enum", "examples")


def load_json_schema(raw: Optional[str]) -> Result[Any]:
    """
    Decode and check JSON Schema text.

    Args:
        raw: JSON Schema text (blank or None is accepted)

    Returns:
        Success with the decoded schema (None for blank input), or Failure
        with a message describing the JSON or schema problem

    Example:
        >>> load_json_schema('{"type": "string"}')
        Success(value={'type': 'string'})
        >>> load_json_schema('{"type": "object1"}').ok
        False
    """
    if raw is None or not raw.strip():
        return Success(None)

    try:
        schema = json.loads(raw)
    except ValueError as e:
        return Failure(f"Invalid JSON: {e}")
    except RecursionError:
        return Failure("Invalid JSON: nesting is too deep")

    if not isinstance(schema, (dict, bool)):
        return Failure(f"Schema must be an object or boolean, got {type(schema).__name__}")

    # validator_for looks the dialect up by URI
    if isinstance(schema, dict) and not isinstance(schema.get("$schema", ""), str):
        return Failure("Invalid JSON Schema: $schema must be a string")

    try:
        problems = _schema_problems(schema)
    except RecursionError:
        return Failure("Invalid JSON Schema: nesting is too deep")

    if problems:
        return Failure(f"Invalid JSON Schema: {'; '.join(problems)}")

    return Success(schema)


def check_json_schema(raw: Optional[str]) -> Optional[str]:
    """
    Validate JSON Schema text.

    Args:
        raw: JSON Schema text

    Returns:
        None if the schema is valid (including blank input), otherwise an
        error message. Never raises.
    """
    result = load_json_schema(raw)
    if isinstance(result, Failure):
        logger.debug("Schema check failed: %s", result.error)
        return result.error
    return None


def _schema_problems(schema: Any) -> list[str]:
    # Unknown keywords are allowed; every meta-schema violation is reported
    validator_class = validator_for(schema)
    meta_validator = validator_class(
        validator_class.META_SCHEMA,
        format_checker=validator_class.FORMAT_CHECKER,
    )
    errors = sorted(
        meta_validator.iter_errors(schema),
        key=lambda err: [str(part) for part in err.path],
    )
    if errors:
        return [_format_schema_error(err) for err in errors]

    return _unresolved_refs(schema)


def _format_schema_error(error) -> str:
    location = "/".join(str(part) for part in error.path)
    return f"{location or 'root'}: {error.message}"


def _unresolved_refs(schema: Any) -> list[str]:
    """List local `$ref` pointers that do not resolve inside the schema."""
    resource = Resource.from_contents(schema, default_specification=DRAFT202012)
    registry = Registry().with_resource(_SCHEMA_URI, resource).crawl()
    resolver = registry.resolver(base_uri=_SCHEMA_URI)

    problems = []
    for ref in _iter_refs(schema):
        if not ref.startswith("#"):
            continue
        try:
            resolver.lookup(ref)
        # Pointers through non-container values raise TypeError or ValueError
        except (Unresolvable, TypeError, ValueError):
            problems.append(f"{ref}: reference cannot be resolved")
    return problems


def _iter_refs(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield value
            elif key not in _DATA_KEYWORDS:
                yield from _iter_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_refs(item)


def schema_from_model(model: Type[BaseModel], indent: Optional[int] = None) -> str:
    """
    Render a Pydantic model's JSON Schema as `$$jsonresponse` text.

    Args:
        model: Pydantic BaseModel class
        indent: Optional JSON indentation

    Returns:
        JSON Schema text

    Example:
        >>> class User(BaseModel):
        ...     name: str
        >>> schema_from_model(User)
        '{"properties": {"name": {"title": "Name", "type": "string"}}, "required": ["name"], "title": "User", "type": "object"}'
    """
    return json.dumps(model.model_json_schema(), indent=indent)
