"""
Sampling option table and profile registry.

Declares every supported sampling option with its kind and bounds, and the
default values of the "core" and "json" profiles.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class OptionKind(str, Enum):
    """Value kinds an option can declare."""
    FLOAT = "float"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_LIST = "string_list"
    FLOAT_MAP = "float_map"


@dataclass(frozen=True)
class OptionSpec:
    """Declaration of one sampling option."""
    name: str
    kind: OptionKind
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    description: str = ""
    backends: tuple[str, ...] = field(default_factory=tuple)


_ALL = ("openai", "ollama", "llama-cpp")


# Option Table
OPTION_SPECS: dict[str, OptionSpec] = {
    spec.name: spec
    for spec in (
        OptionSpec(
            "temperature", OptionKind.FLOAT, 0.0, 2.0,
            "Sampling temperature (higher = more creative, lower = more deterministic)",
            _ALL,
        ),
        OptionSpec(
            "topP", OptionKind.FLOAT, 0.0, 1.0,
            "Nucleus sampling: cumulative probability threshold",
            _ALL,
        ),
        OptionSpec(
            "topK", OptionKind.INTEGER, 1, 1000,
            "Top-K sampling: number of highest probability tokens to keep",
            ("ollama", "llama-cpp"),
        ),
        OptionSpec(
            "minP", OptionKind.FLOAT, 0.0, 1.0,
            "Minimum probability threshold for token sampling",
            ("ollama", "llama-cpp"),
        ),
        OptionSpec(
            "maxTokens", OptionKind.INTEGER, 1, 131072,
            "Maximum number of tokens to generate",
            _ALL,
        ),
        OptionSpec(
            "repeatPenalty", OptionKind.FLOAT, -2.0, 2.0,
            "Penalty for repeating tokens (1.0 = no penalty)",
            ("ollama", "llama-cpp"),
        ),
        OptionSpec(
            "repeatPenaltyNum", OptionKind.INTEGER, 0, 2048,
            "Number of last tokens to apply repeat penalty to",
            ("ollama", "llama-cpp"),
        ),
        OptionSpec(
            "presencePenalty", OptionKind.FLOAT, -2.0, 2.0,
            "Penalty for tokens that have appeared (0.0 = no penalty)",
            ("openai", "llama-cpp"),
        ),
        OptionSpec(
            "frequencyPenalty", OptionKind.FLOAT, -2.0, 2.0,
            "Penalty proportional to token frequency (0.0 = no penalty)",
            ("openai", "llama-cpp"),
        ),
        OptionSpec(
            "mirostat", OptionKind.INTEGER, 0, 2,
            "Mirostat sampling mode (0 = disabled, 1 = Mirostat 1.0, 2 = Mirostat 2.0)",
            ("ollama",),
        ),
        OptionSpec(
            "mirostatTau", OptionKind.FLOAT, 0.0, 10.0,
            "Mirostat target entropy (used when mirostat > 0)",
            ("ollama",),
        ),
        OptionSpec(
            "mirostatEta", OptionKind.FLOAT, 0.0, 1.0,
            "Mirostat learning rate (used when mirostat > 0)",
            ("ollama",),
        ),
        OptionSpec(
            "penalizeNewline", OptionKind.BOOLEAN,
            description="Penalize newline tokens in generation",
            backends=("ollama", "llama-cpp"),
        ),
        OptionSpec(
            "stopSequences", OptionKind.STRING_LIST,
            description="Strings that stop generation when encountered",
            backends=_ALL,
        ),
        OptionSpec(
            "trimWhitespace", OptionKind.BOOLEAN,
            description="Trim trailing whitespace from output",
            backends=("llama-cpp",),
        ),
        OptionSpec(
            "seed", OptionKind.INTEGER, 0, None,
            "Random seed for reproducible results",
            _ALL,
        ),
        OptionSpec(
            "tokenBias", OptionKind.FLOAT_MAP,
            description="Token bias to adjust probability of specific tokens",
            backends=("openai", "llama-cpp"),
        ),
        OptionSpec(
            "evaluationPriority", OptionKind.INTEGER, 0, 10,
            "Priority for sequence evaluation",
            ("llama-cpp",),
        ),
        OptionSpec(
            "contextShiftSize", OptionKind.INTEGER, 0, 4096,
            "Number of tokens to remove when context overflows (0 = auto)",
            ("llama-cpp",),
        ),
        OptionSpec(
            "disableContextShift", OptionKind.BOOLEAN,
            description="Disable context shift when context is full",
            backends=("llama-cpp",),
        ),
    )
}


# Profile Registry (seed has no default in either profile)
PROFILES: dict[str, dict[str, Any]] = {
    "core": {
        "temperature": 0.8,
        "topP": 0.9,
        "topK": 40,
        "minP": 0.0,
        "maxTokens": 128,
        "repeatPenalty": 1.1,
        "repeatPenaltyNum": 64,
        "presencePenalty": 0.0,
        "frequencyPenalty": 1.1,
        "mirostat": 0,
        "mirostatTau": 5.0,
        "mirostatEta": 0.1,
        "penalizeNewline": True,
        "stopSequences": [],
        "trimWhitespace": True,
        "tokenBias": {},
        "evaluationPriority": 5,
        "contextShiftSize": 0,
        "disableContextShift": False,
    },
    "json": {
        "temperature": 0.0,
        "topP": 0.1,
        "topK": 10,
        "minP": 0.0,
        "maxTokens": 4096,
        "repeatPenalty": 1.0,
        "repeatPenaltyNum": 0,
        "presencePenalty": 0.0,
        "frequencyPenalty": 0.0,
        "mirostat": 0,
        "mirostatTau": 5.0,
        "mirostatEta": 0.1,
        "penalizeNewline": False,
        "stopSequences": [],
        "trimWhitespace": True,
        "tokenBias": {},
        "evaluationPriority": 5,
        "contextShiftSize": 0,
        "disableContextShift": False,
    },
}


def get_profile(name: str) -> dict[str, Any]:
    """
    Get the default table of a profile.

    Args:
        name: Profile name ("core" or "json")

    Returns:
        The profile's default table (shared, do not mutate)

    Raises:
        ValueError: If the profile is unknown
    """
    if name not in PROFILES:
        available = ", ".join(sorted(PROFILES.keys()))
        raise ValueError(
            f"Unknown profile: '{name}'. "
            f"Available profiles: {available}"
        )
    return PROFILES[name]


def get_defaults(name: str) -> dict[str, Any]:
    """Return a private copy of a profile's defaults."""
    return deepcopy(get_profile(name))


def options_for_backend(backend: str) -> list[str]:
    """List the option keys a backend honors, in table order."""
    return [key for key, spec in OPTION_SPECS.items() if backend in spec.backends]
