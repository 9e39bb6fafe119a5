"""
Prompt text serialization.

Writes Prompt objects back to the `$$begin` / `$$end` text format. Sections
are emitted in a fixed order: `$$llm`, `$$options`, `$$system`, `$$user`,
`$$jsonresponse`, then every `$$segment=<name>`.
"""

import json
import logging
from typing import Any, Iterable

from .parser import BEGIN_MARKER, END_MARKER, SEGMENT_PREFIX, Section
from .types import Prompt

logger = logging.getLogger(__name__)


def serialize_prompts(prompts: Iterable[Prompt]) -> str:
    """
    Serialize prompts to text.

    Args:
        prompts: Prompt objects; records with an empty user message are skipped

    Returns:
        Text that parse_prompts() reads back to the same prompts

    Example:
        >>> serialize_prompts([Prompt(user="Hello")])
        '$$begin\\n$$user\\nHello\\n$$end'
    """
    lines: list[str] = []

    for prompt in prompts:
        if not prompt.user:
            logger.debug("Skipping prompt without a user message")
            continue

        lines.append(BEGIN_MARKER)

        if prompt.llm is not None:
            lines.append(Section.LLM.marker)
            if prompt.llm.url is not None:
                lines.append(f"url={prompt.llm.url}")
            if prompt.llm.model is not None:
                lines.append(f"model={prompt.llm.model}")

        if prompt.options:
            lines.append(Section.OPTIONS.marker)
            for key, value in prompt.options.items():
                if value is None:
                    continue
                lines.append(f"{key}={format_option_value(value)}")

        if prompt.system:
            lines.append(Section.SYSTEM.marker)
            lines.append(prompt.system)

        lines.append(Section.USER.marker)
        lines.append(prompt.user)

        if prompt.jsonresponse:
            lines.append(Section.JSONRESPONSE.marker)
            lines.append(prompt.jsonresponse)

        if prompt.segment:
            for name, content in prompt.segment.items():
                lines.append(f"{SEGMENT_PREFIX}{name}")
                lines.append(content)

        lines.append(END_MARKER)

    return "\n".join(lines)


def format_option_value(value: Any) -> str:
    """
    Format an option value for a `key=value` line.

    Lists and maps become JSON, booleans become `true` / `false` and numbers
    keep their literal form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, float):
        return repr(value)
    return str(value)
