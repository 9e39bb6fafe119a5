"""
Type definitions for promptfile.

Includes dataclasses for prompt records and the two-case result type
returned by schema and grammar conversion.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar('T')


@dataclass(frozen=True)
class LlmEndpoint:
    """
    Endpoint a prompt is meant to be sent to.
    
    Attributes:
        url: Base URL of the inference service
        model: Model name understood by that service
    """
    url: Optional[str] = None
    model: Optional[str] = None


@dataclass(frozen=True)
class Prompt:
    """
    One `$$begin` ... `$$end` record.
    
    Attributes:
        user: User message (required, never empty)
        system: Optional system message
        options: Validated sampling options (sparse mapping)
        segment: Named text blocks, kept in the order they were recorded
        jsonresponse: Raw JSON Schema text describing the expected output
        llm: Optional endpoint descriptor
    
    Example:
        >>> prompt = Prompt(user="Hello", system="Be brief")
        >>> prompt.to_messages()
        [{'role': 'system', 'content': 'Be brief'}, {'role': 'user', 'content': 'Hello'}]
    """
    user: str
    system: Optional[str] = None
    options: Optional[dict[str, Any]] = None
    segment: Optional[dict[str, str]] = None
    jsonresponse: Optional[str] = None
    llm: Optional[LlmEndpoint] = None
    
    def to_messages(self) -> list[dict]:
        """Build chat messages with 'role' and 'content' keys."""
        messages = []
        if self.system:
            messages.append({"role": "system", "content": self.system})
        messages.append({"role": "user", "content": self.user})
        return messages


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful conversion carrying its value."""
    value: T
    
    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed conversion carrying a human-readable message."""
    error: str
    
    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]
