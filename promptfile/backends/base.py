"""
Backend base class and registry.

Defines the interface for inference backends and maintains the registry
of supported backends with their configurations.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..schema import load_json_schema
from ..types import Failure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendConfig:
    """Configuration for an inference backend."""
    name: str
    supports_json_response: bool = False


# Backend Registry
BACKENDS: dict[str, BackendConfig] = {
    "openai": BackendConfig(
        name="OpenAI",
        supports_json_response=True,
    ),
    "ollama": BackendConfig(
        name="Ollama",
        supports_json_response=False,
    ),
    "llama-cpp": BackendConfig(
        name="llama.cpp",
        supports_json_response=True,
    ),
}


class BaseBackend(ABC):
    """
    Abstract base class for backend option adapters.

    Each backend maps validated sampling options (and an optional JSON
    Schema) to its own option names and nesting. Adapters never raise:
    a bad schema only drops the structured-output field.
    """

    def __init__(self, config: BackendConfig):
        self.config = config

    @abstractmethod
    def build_options(
        self,
        options: Mapping[str, Any],
        jsonresponse: Optional[str] = None,
    ) -> dict[str, Any]:
        """Build the backend's option payload."""
        pass

    def load_schema(self, jsonresponse: Optional[str]) -> Optional[Any]:
        """
        Decode a `jsonresponse` schema for structured output.

        Returns:
            The decoded schema, or None when the backend has no structured
            output, the text is blank, or the schema is invalid
        """
        if not jsonresponse or not self.config.supports_json_response:
            return None

        loaded = load_json_schema(jsonresponse)
        if isinstance(loaded, Failure):
            logger.debug("Ignoring jsonresponse for %s: %s", self.config.name, loaded.error)
            return None
        return loaded.value


def get_backend(name: str) -> BaseBackend:
    """
    Get a backend adapter by name.

    Args:
        name: Backend name ("openai", "ollama" or "llama-cpp")

    Returns:
        Configured backend instance

    Raises:
        ValueError: If the backend is unknown

    Examples:
        >>> backend = get_backend("ollama")
        >>> backend.build_options({"maxTokens": 512})
        {'num_predict': 512}
    """
    name = name.lower()

    if name not in BACKENDS:
        available = ", ".join(sorted(BACKENDS.keys()))
        raise ValueError(
            f"Unknown backend: '{name}'. "
            f"Available backends: {available}"
        )

    # Import the specific backend adapter
    from . import openai_backend, ollama_backend, llama_cpp_backend

    adapter_map = {
        "openai": openai_backend.OpenAIBackend,
        "ollama": ollama_backend.OllamaBackend,
        "llama-cpp": llama_cpp_backend.LlamaCppBackend,
    }

    return adapter_map[name](config=BACKENDS[name])


def copy_present(
    options: Mapping[str, Any],
    result: dict[str, Any],
    names: Mapping[str, str],
) -> None:
    """Copy options that are present, renaming keys per `names`."""
    for source, target in names.items():
        value = options.get(source)
        if value is not None:
            result[target] = value
