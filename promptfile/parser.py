"""
Prompt text parsing.

Turns text with `$$begin` / `$$end` records into Prompt objects:

    $$begin
    $$llm
    url=http://localhost:11434
    model=llama3.2
    $$options
    temperature=0.7
    maxTokens=2048
    $$system
    You are a helpful assistant
    $$user
    Hello, world!
    $$jsonresponse
    {"type": "object", "properties": {}}
    $$segment=footer
    Thanks!
    $$end

Sections may appear in any order. Text outside records is ignored, and a
record without a `$$user` section is dropped.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Iterator, Optional

from .options import OPTION_SPECS, OptionKind, get_profile, parse_options
from .types import LlmEndpoint, Prompt

logger = logging.getLogger(__name__)

BEGIN_MARKER = "$$begin"
END_MARKER = "$$end"
SEGMENT_PREFIX = "$$segment="


class Section(str, Enum):
    """Section a line of a record belongs to."""
    SYSTEM = "system"
    USER = "user"
    OPTIONS = "options"
    LLM = "llm"
    JSONRESPONSE = "jsonresponse"
    SEGMENT = "segment"

    @property
    def marker(self) -> str:
        return f"$${self.value}"


SECTION_MARKERS: dict[str, Section] = {
    section.marker: section for section in Section if section is not Section.SEGMENT
}

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_TRUE_TOKENS = ("true", "1", "y")
_FALSE_TOKENS = ("false", "0", "n")
_NUMERIC_KINDS = (OptionKind.INTEGER, OptionKind.FLOAT)
_LLM_KEYS = ("url", "model")


def parse_prompts(text: str, profile: str = "core") -> list[Prompt]:
    """
    Parse prompt records from text.

    Args:
        text: Raw text containing `$$begin` / `$$end` records
        profile: Options profile used to validate `$$options` sections

    Returns:
        Prompts in source order. Malformed records are dropped, never raised.

    Raises:
        ValueError: If the profile is unknown

    Example:
        >>> parse_prompts("$$begin\\n$$user\\nHello\\n$$end")
        [Prompt(user='Hello', system=None, options=None, segment=None, jsonresponse=None, llm=None)]
    """
    get_profile(profile)

    prompts: list[Prompt] = []
    builder: Optional[_RecordBuilder] = None

    for line in (text or "").split("\n"):
        marker = line.strip()

        if marker == BEGIN_MARKER:
            if builder is not None:
                _finish(builder, prompts)
            builder = _RecordBuilder(profile)
            continue

        if marker == END_MARKER:
            if builder is not None:
                _finish(builder, prompts)
            builder = None
            continue

        if builder is None:
            continue

        if marker in SECTION_MARKERS:
            builder.open_section(SECTION_MARKERS[marker])
        elif marker.startswith(SEGMENT_PREFIX):
            builder.open_section(Section.SEGMENT, marker[len(SEGMENT_PREFIX):].strip())
        else:
            builder.add_line(line)

    if builder is not None:
        logger.debug("Dropping record without %s", END_MARKER)

    return prompts


def _finish(builder: "_RecordBuilder", prompts: list[Prompt]) -> None:
    prompt = builder.build()
    if prompt is None:
        logger.debug("Dropping record without %s section", Section.USER.marker)
    else:
        prompts.append(prompt)


class _RecordBuilder:
    """Accumulates the sections of one record."""

    def __init__(self, profile: str):
        self.profile = profile
        self.fields: dict[str, Any] = {}
        self.segment: dict[str, str] = {}
        self.section: Optional[Section] = None
        self.segment_name: Optional[str] = None
        self.lines: list[str] = []

    def open_section(self, section: Section, segment_name: Optional[str] = None) -> None:
        self.close_section()
        self.section = section
        self.segment_name = segment_name

    def add_line(self, line: str) -> None:
        if self.section is not None:
            self.lines.append(line)

    def close_section(self) -> None:
        # A marker with no lines leaves earlier content untouched
        if self.section is not None and self.lines:
            self._store(self.section, "\n".join(self.lines).strip())
        self.section = None
        self.segment_name = None
        self.lines = []

    def _store(self, section: Section, content: str) -> None:
        if section is Section.SEGMENT:
            if self.segment_name:
                self.segment[self.segment_name] = content
            else:
                logger.debug("Dropping segment without a name")
        elif section is Section.OPTIONS:
            self.fields["options"] = parse_options(
                self.profile, _decode_options(content), use_all_options=False
            ) or None
        elif section is Section.LLM:
            self.fields["llm"] = _decode_llm(content)
        else:
            self.fields[section.value] = content or None

    def build(self) -> Optional[Prompt]:
        self.close_section()
        if not self.fields.get("user"):
            return None
        return Prompt(segment=self.segment or None, **self.fields)


def _iter_key_values(content: str) -> Iterator[tuple[str, str]]:
    """Yield `key=value` pairs, skipping lines without a key."""
    for line in content.split("\n"):
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        yield key, value.strip()


def _decode_options(content: str) -> dict[str, Any]:
    raw: dict[str, Any] = {}
    for key, text in _iter_key_values(content):
        spec = OPTION_SPECS.get(key)
        value = decode_option_value(text, spec.kind if spec else None)
        if value is not None:
            raw[key] = value
    return raw


def _decode_llm(content: str) -> Optional[LlmEndpoint]:
    config: dict[str, str] = {}
    for key, text in _iter_key_values(content):
        if key in _LLM_KEYS:
            value = _unquote(text)
            if value:
                config[key] = value
    return LlmEndpoint(**config) if config else None


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def _decode_number(text: str) -> Optional[float]:
    candidate = text.replace(",", ".", 1)
    if not _NUMBER_RE.fullmatch(candidate):
        return None
    try:
        if any(char in candidate for char in ".eE"):
            return float(candidate)
        return int(candidate)
    except ValueError:
        # Digit strings past the interpreter's int conversion limit
        return None


def decode_option_value(text: str, kind: Optional[OptionKind] = None) -> Any:
    """
    Decode the value part of a `key=value` line.

    Tried in order: empty text (absent), JSON array or object, boolean
    token (`true`/`1`/`y`, `false`/`0`/`n`), decimal number with `,` or `.`
    as separator, and finally the unquoted text. For integer and float
    options the number is tried before the boolean tokens.

    Args:
        text: Raw value text
        kind: Declared kind of the option, if known

    Returns:
        Decoded value, or None for an empty value

    Example:
        >>> decode_option_value("0,7")
        0.7
        >>> decode_option_value("Y")
        True
        >>> decode_option_value("1", OptionKind.INTEGER)
        1
    """
    text = text.strip()
    if text == "":
        return None

    clean = _unquote(text)

    if clean.startswith(("[", "{")):
        try:
            value = json.loads(clean)
        except (ValueError, RecursionError):
            pass
        else:
            if isinstance(value, (list, dict)):
                return value

    if kind in _NUMERIC_KINDS:
        number = _decode_number(clean)
        if number is not None:
            return number

    lower = clean.lower()
    if lower in _TRUE_TOKENS:
        return True
    if lower in _FALSE_TOKENS:
        return False

    number = _decode_number(clean)
    if number is not None:
        return number

    return clean
