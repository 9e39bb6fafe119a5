"""
Validation and defaulting of sampling options.
"""

import logging
import math
from collections.abc import Mapping
from copy import deepcopy
from typing import Any

from .table import OPTION_SPECS, OptionKind, OptionSpec, get_profile

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    if not _is_number(value):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def _check_bounds(spec: OptionSpec, value: float) -> None:
    if spec.minimum is not None and value < spec.minimum:
        raise ValueError(f"{spec.name} must be >= {spec.minimum}, got {value}")
    if spec.maximum is not None and value > spec.maximum:
        raise ValueError(f"{spec.name} must be <= {spec.maximum}, got {value}")


def check_option_value(spec: OptionSpec, value: Any) -> Any:
    """
    Check a value against an option's declared kind and bounds.

    Args:
        spec: Option declaration
        value: Candidate value

    Returns:
        The value to store. Integral floats become int for integer options,
        lists and maps are copied.

    Raises:
        ValueError: If the value has the wrong kind or is out of bounds
    """
    if spec.kind is OptionKind.FLOAT:
        if not _is_finite_number(value):
            raise ValueError(f"{spec.name} must be a finite number, got {value!r}")
        _check_bounds(spec, value)
        return value

    if spec.kind is OptionKind.INTEGER:
        # Integral floats are stored as int, so 40.0 is kept as 40
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            value = int(value)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{spec.name} must be an integer, got {value!r}")
        _check_bounds(spec, value)
        return value

    if spec.kind is OptionKind.BOOLEAN:
        if not isinstance(value, bool):
            raise ValueError(f"{spec.name} must be a boolean, got {value!r}")
        return value

    if spec.kind is OptionKind.STRING_LIST:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ValueError(f"{spec.name} must be a list of strings, got {value!r}")
        return list(value)

    if spec.kind is OptionKind.FLOAT_MAP:
        if not isinstance(value, Mapping) or not all(
            isinstance(k, str) and _is_finite_number(v)
            for k, v in value.items()
        ):
            raise ValueError(f"{spec.name} must map strings to numbers, got {value!r}")
        return dict(value)

    raise ValueError(f"Unknown option kind: {spec.kind}")


def parse_options(
    profile: str,
    raw: Any = None,
    use_all_options: bool = True,
) -> dict[str, Any]:
    """
    Validate raw option values against a profile.

    Args:
        profile: Profile name ("core" or "json")
        raw: Mapping of option names to candidate values
        use_all_options: If True, missing or invalid options are filled with
            the profile default; if False they are left out

    Returns:
        Validated option mapping in table order, seed last. Unknown keys are
        dropped. Bad input never raises; the worst case is an empty mapping.

    Raises:
        ValueError: If the profile is unknown

    Example:
        >>> parse_options("core", {"temperature": 0.7}, use_all_options=False)
        {'temperature': 0.7}
        >>> parse_options("json", {"temperature": 5})["temperature"]
        0.0
    """
    defaults = get_profile(profile)
    source = raw if isinstance(raw, Mapping) else {}

    result: dict[str, Any] = {}

    for key, default in defaults.items():
        supplied = source.get(key)
        if supplied is not None:
            try:
                result[key] = check_option_value(OPTION_SPECS[key], supplied)
                continue
            except ValueError as e:
                logger.debug("Dropping option for profile %s: %s", profile, e)
        if use_all_options:
            result[key] = deepcopy(default)

    # seed has no default: kept only when supplied and valid
    seed = source.get("seed")
    if seed is not None:
        try:
            result["seed"] = check_option_value(OPTION_SPECS["seed"], seed)
        except ValueError as e:
            logger.debug("Dropping option: %s", e)

    return result
