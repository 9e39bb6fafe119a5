"""
OpenAI-compatible backend adapter.

Maps options to the Chat Completions request fields and turns a valid JSON
Schema into a `response_format` block.
"""

from typing import Any, Mapping, Optional

from .base import BaseBackend, copy_present

_RENAMES = {
    "temperature": "temperature",
    "topP": "top_p",
    "maxTokens": "max_tokens",
    "frequencyPenalty": "frequency_penalty",
    "presencePenalty": "presence_penalty",
    "seed": "seed",
}


class OpenAIBackend(BaseBackend):
    """
    Adapter for OpenAI and OpenAI-compatible chat APIs.

    Example:
        >>> get_backend("openai").build_options(
        ...     {"topP": 0.9, "stopSequences": []},
        ...     '{"type": "string"}',
        ... )
        {'top_p': 0.9, 'response_format': {'type': 'json_schema', 'json_schema': {'name': 'response', 'strict': True, 'schema': {'type': 'string'}}}}
    """

    def build_options(
        self,
        options: Mapping[str, Any],
        jsonresponse: Optional[str] = None,
    ) -> dict[str, Any]:
        """Build OpenAI-format sampling fields."""
        result: dict[str, Any] = {}

        copy_present(options, result, _RENAMES)

        if options.get("stopSequences"):
            result["stop"] = list(options["stopSequences"])
        if options.get("tokenBias"):
            result["logit_bias"] = dict(options["tokenBias"])

        schema = self.load_schema(jsonresponse)
        if schema is not None:
            result["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "response",
                    "strict": True,
                    "schema": schema,
                },
            }

        return result
