"""
JSON Schema to grammar conversion for in-process inference runtimes.

Supported JSON Schema constructs:
- `object` with `properties` (and `additionalProperties: true`)
- `array` with `items`
- Primitive types: `string`, `number`, `integer`, `boolean`, `null`
- `enum` and `const`

Anything else is rejected with an error naming the offending fragment.
"""

import json
import logging
import re
from typing import Any

from .types import Failure, Result, Success

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = ("string", "number", "integer", "boolean", "null")


class UnsupportedSchemaError(ValueError):
    """Raised when a schema fragment has no grammar equivalent."""


def convert_json_schema_to_grammar(schema: Any) -> Result[dict]:
    """
    Convert a JSON Schema document to a grammar AST.

    Args:
        schema: Decoded JSON Schema

    Returns:
        Success with the grammar AST, or Failure naming the unsupported
        construct

    Example:
        >>> convert_json_schema_to_grammar({
        ...     "type": "object",
        ...     "properties": {"name": {"type": "string"}},
        ... })
        Success(value={'type': 'object', 'properties': {'name': {'type': 'string'}}, 'additionalProperties': False})
        >>> convert_json_schema_to_grammar({"oneOf": []}).ok
        False
    """
    try:
        return Success(_convert(schema))
    except UnsupportedSchemaError as e:
        logger.debug("Grammar conversion failed: %s", e)
        return Failure(str(e))
    except RecursionError:
        return Failure("Unsupported JSON Schema: nesting is too deep")


def _convert(schema: Any) -> dict:
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(f"Unsupported JSON Schema format: {_describe(schema)}")

    schema_type = schema.get("type")

    if schema_type == "array" and isinstance(schema.get("items"), dict):
        return {
            "type": "array",
            "items": _convert(schema["items"]),
        }

    if schema_type == "object" and isinstance(schema.get("properties"), dict):
        return {
            "type": "object",
            "properties": {
                name: _convert(value) for name, value in schema["properties"].items()
            },
            # Only a literal true survives, constraint objects become false
            "additionalProperties": schema.get("additionalProperties") is True,
        }

    if schema_type in _PRIMITIVE_TYPES:
        return {"type": schema_type}

    if isinstance(schema.get("enum"), list):
        return {"enum": list(schema["enum"])}

    if "const" in schema:
        return {"const": schema["const"]}

    raise UnsupportedSchemaError(f"Unsupported JSON Schema format: {_describe(schema)}")


def _describe(fragment: Any) -> str:
    try:
        return json.dumps(fragment, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(fragment)


# Shared JSON rules used by every rendered grammar
_COMMON_RULES = [
    'ws ::= [ \\t\\n\\r]*',
    'string ::= "\\"" char* "\\""',
    'char ::= [^"\\\\] | "\\\\" escape',
    'escape ::= ["\\\\/bfnrt] | "u" hex hex hex hex',
    'hex ::= [0-9a-fA-F]',
    'number ::= integer ( "." digit+ )? ( [eE] [+-]? digit+ )?',
    'integer ::= "-"? ( "0" | [1-9] digit* )',
    'digit ::= [0-9]',
    'boolean ::= "true" | "false"',
    'null ::= "null"',
    'value ::= object | array | string | number | boolean | null',
    'object ::= "{" ws ( member ( ws "," ws member )* )? ws "}"',
    'member ::= string ws ":" ws value',
    'array ::= "[" ws ( value ( ws "," ws value )* )? ws "]"',
]

_COMMON_RULE_NAMES = {rule.split(" ::= ")[0] for rule in _COMMON_RULES}


class GbnfRenderer:
    """Renders a grammar AST as GBNF rules for llama.cpp-style runtimes."""

    def __init__(self):
        self.rules: list[str] = []
        self.rule_names: set[str] = set()

    def render(self, grammar: dict) -> str:
        """
        Render a grammar AST.

        Args:
            grammar: AST produced by convert_json_schema_to_grammar

        Returns:
            GBNF grammar text with a `root` rule
        """
        self.rules = []
        self.rule_names = set(_COMMON_RULE_NAMES) | {"root"}

        root_expr = self._expression(grammar, "root")
        self.rules.insert(0, f"root ::= {root_expr}")
        self.rules.extend(_COMMON_RULES)

        return "\n".join(self.rules)

    def _expression(self, node: dict, name: str) -> str:
        if "enum" in node:
            if not node["enum"]:
                raise ValueError(f"Enum without values in rule {name}")
            return " | ".join(_literal(value) for value in node["enum"])

        if "const" in node:
            return _literal(node["const"])

        node_type = node.get("type")

        if node_type in _PRIMITIVE_TYPES:
            return node_type

        if node_type == "array":
            item = self._rule(node["items"], f"{name}-item")
            return f'"[" ws ( {item} ( ws "," ws {item} )* )? ws "]"'

        if node_type == "object":
            members = []
            for prop_name, prop_node in node["properties"].items():
                prop_rule = self._rule(prop_node, f"{name}-{_safe_name(prop_name)}")
                members.append(f'{_literal(prop_name)} ws ":" ws {prop_rule}')

            if not members:
                if node.get("additionalProperties"):
                    return "object"
                return '"{" ws "}"'

            body = ' ws "," ws '.join(members)
            if node.get("additionalProperties"):
                body += ' ( ws "," ws member )*'
            return f'"{{" ws {body} ws "}}"'

        raise ValueError(f"Unknown grammar node in rule {name}: {node!r}")

    def _rule(self, node: dict, name: str) -> str:
        expr = self._expression(node, name)
        if expr in _COMMON_RULE_NAMES:
            return expr

        rule_name = name
        counter = 1
        while rule_name in self.rule_names:
            counter += 1
            rule_name = f"{name}{counter}"
        self.rule_names.add(rule_name)

        self.rules.append(f"{rule_name} ::= {expr}")
        return rule_name


def _safe_name(name: str) -> str:
    """Convert a property name to a GBNF rule name fragment."""
    safe = re.sub(r"[^a-zA-Z0-9]+", "-", name).strip("-")
    return safe or "prop"


def _literal(value: Any) -> str:
    """GBNF literal matching the JSON encoding of a value."""
    text = json.dumps(value, ensure_ascii=False)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_gbnf(grammar: dict) -> str:
    """
    Render a grammar AST as GBNF text.

    Example:
        >>> print(render_gbnf({"type": "array", "items": {"type": "integer"}}))  # doctest: +ELLIPSIS
        root ::= "[" ws ( integer ( ws "," ws integer )* )? ws "]"
        ws ::= ...
    """
    return GbnfRenderer().render(grammar)
