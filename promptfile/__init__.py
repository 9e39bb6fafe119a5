"""
promptfile - Text-format LLM prompts with portable sampling options

A library that combines:
• A line-oriented text format for storing prompts (`$$begin` ... `$$end`)
• Validated sampling options with "core" and "json" default profiles
• Option mapping for OpenAI-compatible APIs, Ollama and llama.cpp
• JSON Schema checks and JSON Schema to grammar conversion

Basic usage:
    >>> from promptfile import parse_prompts, to_openai_options
    >>>
    >>> text = '''$$begin
    ... $$options
    ... temperature=0.7
    ... $$user
    ... Create user Alice, 30
    ... $$jsonresponse
    ... {"type": "object", "properties": {"name": {"type": "string"}}}
    ... $$end'''
    >>> prompt = parse_prompts(text)[0]
    >>> to_openai_options(prompt.options, prompt.jsonresponse)["temperature"]
    0.7
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .types import Prompt, LlmEndpoint, Success, Failure, Result
from .options import (
    OPTION_SPECS,
    PROFILES,
    get_profile,
    get_defaults,
    options_for_backend,
    parse_options,
)
from .parser import parse_prompts, decode_option_value
from .serializer import serialize_prompts
from .schema import check_json_schema, load_json_schema, schema_from_model
from .grammar import convert_json_schema_to_grammar, render_gbnf
from .backends import (
    BACKENDS,
    get_backend,
    to_openai_options,
    to_ollama_options,
    to_llama_cpp_options,
    build_backend_options,
)

__all__ = [
    "Prompt",
    "LlmEndpoint",
    "Success",
    "Failure",
    "Result",
    "OPTION_SPECS",
    "PROFILES",
    "get_profile",
    "get_defaults",
    "options_for_backend",
    "parse_options",
    "parse_prompts",
    "decode_option_value",
    "serialize_prompts",
    "check_json_schema",
    "load_json_schema",
    "schema_from_model",
    "convert_json_schema_to_grammar",
    "render_gbnf",
    "BACKENDS",
    "get_backend",
    "to_openai_options",
    "to_ollama_options",
    "to_llama_cpp_options",
    "build_backend_options",
]
