"""
Ollama backend adapter.
"""

from typing import Any, Mapping, Optional

from .base import BaseBackend, copy_present

_RENAMES = {
    "temperature": "temperature",
    "topP": "top_p",
    "topK": "top_k",
    "minP": "min_p",
    "maxTokens": "num_predict",
    "repeatPenalty": "repeat_penalty",
    "repeatPenaltyNum": "repeat_last_n",
    "mirostat": "mirostat",
    "mirostatTau": "mirostat_tau",
    "mirostatEta": "mirostat_eta",
    "seed": "seed",
    "penalizeNewline": "penalize_newline",
}


class OllamaBackend(BaseBackend):
    """
    Adapter for the Ollama `options` object.

    Ollama has no structured-output path here, so `jsonresponse` is ignored.
    """

    def build_options(
        self,
        options: Mapping[str, Any],
        jsonresponse: Optional[str] = None,
    ) -> dict[str, Any]:
        """Build Ollama-format options."""
        result: dict[str, Any] = {}

        copy_present(options, result, _RENAMES)

        if options.get("stopSequences"):
            result["stop"] = list(options["stopSequences"])

        return result
