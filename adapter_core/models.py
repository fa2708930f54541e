# =============================================================================
# adapter_core/models.py  —  Data Models (the "nouns" of the tool contract)
# =============================================================================
#
# These dataclasses define the shape of everything that flows between the
# server facade, the registry, the envelope and the handlers:
#
#   ToolDefinition  : what gets registered (name + schema + handler)
#   ToolSpec        : what gets advertised (no handler)
#   TextBlock       : one piece of returned content
#   InvocationResult: what every tool call returns, success or failure
#   Success/Failure: explicit result type used by validation and handlers
#
# All of them are frozen: a definition is fixed once registered and a result
# is built fresh per call and never mutated afterwards.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from adapter_core.schema import Object

ERROR_PREFIX = "Error: "


# -----------------------------------------------------------------------------
# Tool declarations
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolSpec:
    """The discoverable part of a tool: name, description and input schema."""

    name: str
    description: str
    input_schema: "Object"


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool.

    ``handler`` receives the validated parameters as keyword arguments.  It
    may be a plain function or a coroutine function; the envelope awaits
    whatever comes back if it is awaitable.
    """

    name: str
    description: str
    input_schema: "Object"
    handler: Callable[..., Any]

    @property
    def spec(self) -> ToolSpec:
        return ToolSpec(self.name, self.description, self.input_schema)


# -----------------------------------------------------------------------------
# Invocation results
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextBlock:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class InvocationResult:
    """Ordered content blocks returned to the caller.

    Failures use the same shape: a single block starting with ``"Error: "``.
    There is no error flag; callers that care inspect the text.
    """

    content: tuple[TextBlock, ...] = field(default_factory=tuple)

    @classmethod
    def from_text(cls, text: str) -> "InvocationResult":
        return cls((TextBlock(text),))

    @classmethod
    def failure(cls, message: str) -> "InvocationResult":
        return cls.from_text(f"{ERROR_PREFIX}{message}")

    @property
    def text(self) -> str:
        """All text blocks joined together."""
        return "".join(block.text for block in self.content)

    @property
    def is_error(self) -> bool:
        """Caller-side convenience: the recognisable failure prefix."""
        return len(self.content) == 1 and self.content[0].text.startswith(ERROR_PREFIX)


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Failure:
    message: str
    path: str = ""


Result = Success | Failure


# -----------------------------------------------------------------------------
# Per-invocation lifecycle
# -----------------------------------------------------------------------------
class InvocationState(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    VALIDATION_FAILED = "validation_failed"
    VALIDATED = "validated"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RESPONDED = "responded"
