"""
promptfile Backend Adapters

Option mapping for OpenAI-compatible APIs, Ollama and in-process llama.cpp.
"""

from typing import Any, Mapping, Optional

from ..types import Prompt
from .base import (
    BaseBackend,
    BackendConfig,
    BACKENDS,
    get_backend,
)
from .openai_backend import OpenAIBackend
from .ollama_backend import OllamaBackend
from .llama_cpp_backend import LlamaCppBackend


def to_openai_options(
    options: Optional[Mapping[str, Any]],
    jsonresponse: Optional[str] = None,
) -> dict[str, Any]:
    """Map options (and an optional JSON Schema) to OpenAI request fields."""
    return get_backend("openai").build_options(options or {}, jsonresponse)


def to_ollama_options(options: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Map options to an Ollama `options` object."""
    return get_backend("ollama").build_options(options or {})


def to_llama_cpp_options(
    options: Optional[Mapping[str, Any]],
    jsonresponse: Optional[str] = None,
) -> dict[str, Any]:
    """Map options (and an optional JSON Schema) to llama.cpp generation options."""
    return get_backend("llama-cpp").build_options(options or {}, jsonresponse)


def build_backend_options(prompt: Prompt, backend: str) -> dict[str, Any]:
    """
    Map a prompt's options and `jsonresponse` to a backend's option shape.

    Args:
        prompt: Parsed prompt
        backend: Backend name ("openai", "ollama" or "llama-cpp")

    Returns:
        Backend-specific option payload

    Example:
        >>> prompt = parse_prompts("$$begin\\n$$options\\ntopK=20\\n$$user\\nHi\\n$$end")[0]
        >>> build_backend_options(prompt, "ollama")
        {'top_k': 20}
    """
    return get_backend(backend).build_options(prompt.options or {}, prompt.jsonresponse)


__all__ = [
    "BaseBackend",
    "BackendConfig",
    "BACKENDS",
    "get_backend",
    "OpenAIBackend",
    "OllamaBackend",
    "LlamaCppBackend",
    "to_openai_options",
    "to_ollama_options",
    "to_llama_cpp_options",
    "build_backend_options",
]
