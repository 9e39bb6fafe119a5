"""
llama.cpp backend adapter.

Keeps camelCase option names, nests the penalty settings under
`repeatPenalty` and attaches a grammar built from the JSON Schema.
"""

import logging
from typing import Any, Mapping, Optional

from ..grammar import convert_json_schema_to_grammar
from ..types import Failure
from .base import BaseBackend, copy_present

logger = logging.getLogger(__name__)

_RENAMES = {
    "temperature": "temperature",
    "topP": "topP",
    "topK": "topK",
    "minP": "minP",
    "maxTokens": "maxTokens",
    "seed": "seed",
    "trimWhitespace": "trimWhitespaceSuffix",
    "evaluationPriority": "evaluationPriority",
    "contextShiftSize": "contextShiftSize",
    "disableContextShift": "disableContextShift",
}

_PENALTY_RENAMES = {
    "repeatPenalty": "penalty",
    "repeatPenaltyNum": "lastTokens",
    "frequencyPenalty": "frequencyPenalty",
    "presencePenalty": "presencePenalty",
    "penalizeNewline": "penalizeNewLine",
}


class LlamaCppBackend(BaseBackend):
    """
    Adapter for in-process llama.cpp generation options.

    Example:
        >>> get_backend("llama-cpp").build_options(
        ...     {"repeatPenalty": 1.1, "repeatPenaltyNum": 64},
        ... )
        {'repeatPenalty': {'penalty': 1.1, 'lastTokens': 64}}
    """

    def build_options(
        self,
        options: Mapping[str, Any],
        jsonresponse: Optional[str] = None,
    ) -> dict[str, Any]:
        """Build llama.cpp-format options."""
        result: dict[str, Any] = {}

        copy_present(options, result, _RENAMES)

        if options.get("stopSequences"):
            result["customStopTriggers"] = list(options["stopSequences"])
        if options.get("tokenBias"):
            result["tokenBias"] = dict(options["tokenBias"])

        penalty: dict[str, Any] = {}
        copy_present(options, penalty, _PENALTY_RENAMES)
        if penalty:
            result["repeatPenalty"] = penalty

        grammar = self._build_grammar(jsonresponse)
        if grammar is not None:
            result["grammar"] = grammar

        return result

    def _build_grammar(self, jsonresponse: Optional[str]) -> Optional[dict]:
        schema = self.load_schema(jsonresponse)
        if schema is None:
            return None

        converted = convert_json_schema_to_grammar(schema)
        if isinstance(converted, Failure):
            logger.debug("No grammar for %s: %s", self.config.name, converted.error)
            return None
        return converted.value
