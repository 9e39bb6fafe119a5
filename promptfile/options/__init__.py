"""
Sampling option table, profiles and validation.
"""

from .table import (
    OptionKind,
    OptionSpec,
    OPTION_SPECS,
    PROFILES,
    get_profile,
    get_defaults,
    options_for_backend,
)
from .parse import parse_options, check_option_value

__all__ = [
    "OptionKind",
    "OptionSpec",
    "OPTION_SPECS",
    "PROFILES",
    "get_profile",
    "get_defaults",
    "options_for_backend",
    "parse_options",
    "check_option_value",
]
