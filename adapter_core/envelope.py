# =============================================================================
# adapter_core/envelope.py  —  The Invocation Envelope
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Runs one tool call and guarantees the caller gets back an
#   InvocationResult no matter what the handler does.
#
# THE ALGORITHM (per call, strictly in order):
#   1. VALIDATE   raw input against the tool's schema.  On failure the
#                 handler is never touched.
#   2. EXECUTE    the handler with the validated record as keyword
#                 arguments, awaiting it if it is a coroutine.
#   3. NORMALIZE  failures: any exception from step 2 collapses to
#                 "Error: <message>".  Nothing is retried.
#   4. SHAPE      successes: content blocks pass through, strings become one
#                 block, anything else is pretty-printed JSON.
#
#   RECEIVED → VALIDATING → VALIDATION_FAILED ─────────────────┐
#                         → VALIDATED → EXECUTING → SUCCEEDED ─┼→ RESPONDED
#                                                  → FAILED ────┘
# =============================================================================

import inspect
import json
import logging
from typing import Any, Mapping

from adapter_core.errors import ToolError
from adapter_core.models import (
    Failure,
    InvocationResult,
    InvocationState,
    Result,
    Success,
    TextBlock,
    ToolDefinition,
)
from adapter_core.schema import validate

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


async def invoke_tool(tool: ToolDefinition, raw_input: Mapping[str, Any] | None) -> InvocationResult:
    """Validate, execute and normalize a single call to ``tool``."""
    _transition(tool.name, InvocationState.RECEIVED)

    _transition(tool.name, InvocationState.VALIDATING)
    checked = validate(tool.input_schema, {} if raw_input is None else raw_input)
    if isinstance(checked, Failure):
        _transition(tool.name, InvocationState.VALIDATION_FAILED)
        return _respond(tool.name, InvocationResult.failure(checked.message))
    _transition(tool.name, InvocationState.VALIDATED)

    _transition(tool.name, InvocationState.EXECUTING)
    outcome = await _execute(tool, checked.value)
    if isinstance(outcome, Failure):
        _transition(tool.name, InvocationState.FAILED)
        return _respond(tool.name, InvocationResult.failure(outcome.message))

    _transition(tool.name, InvocationState.SUCCEEDED)
    return _respond(tool.name, to_result(outcome.value))


async def _execute(tool: ToolDefinition, params: dict[str, Any]) -> Result:
    """Run the handler, converting anything it raises into a Failure.

    This is the single place where exceptions from handler code are caught.
    """
    try:
        value = tool.handler(**params)
        if inspect.isawaitable(value):
            value = await value
    except ToolError as e:
        logger.info("%s failed: %s", tool.name, e.message)
        return Failure(e.message or UNKNOWN_ERROR)
    except Exception as e:
        logger.exception("%s raised an unexpected error", tool.name)
        return Failure(str(e) or UNKNOWN_ERROR)

    if isinstance(value, Failure):
        return value
    if isinstance(value, Success):
        return value
    return Success(value)


def to_result(value: Any) -> InvocationResult:
    """Shape a handler's successful return value into content blocks."""
    if isinstance(value, InvocationResult):
        return value
    if isinstance(value, TextBlock):
        return InvocationResult((value,))
    if isinstance(value, (list, tuple)) and value and all(isinstance(v, TextBlock) for v in value):
        return InvocationResult(tuple(value))
    if isinstance(value, str):
        return InvocationResult.from_text(value)
    if value is None:
        return InvocationResult.from_text("")
    return InvocationResult.from_text(serialize(value))


def serialize(value: Any) -> str:
    """Deterministic pretty-printed JSON for structured payloads."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _transition(tool_name: str, state: InvocationState) -> None:
    logger.debug("%s: %s", tool_name, state.value)


def _respond(tool_name: str, result: InvocationResult) -> InvocationResult:
    _transition(tool_name, InvocationState.RESPONDED)
    return result
