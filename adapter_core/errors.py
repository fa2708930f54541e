# =============================================================================
# adapter_core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the adapters know about is a ToolError.  The invocation
# envelope (envelope.py) is the only place these are caught for a tool call;
# it turns them into the single "Error: <message>" result shape.
#
#   Per-invocation (recovered by the envelope):
#     ValidationError    : input did not match the tool's schema
#     UpstreamError      : the third-party API answered with a failure
#     ConnectivityError  : the third-party API could not be reached
#     UnknownToolError   : the caller asked for a tool that doesn't exist
#
#   Startup-time (fatal, abort before serving):
#     DuplicateToolError, RegistryFrozenError, ConfigError
# =============================================================================


class ToolError(Exception):
    """Base class for every error raised by the adapter core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ToolError):
    """Input failed schema validation.

    ``path`` names the offending parameter, e.g. ``"mode"`` or
    ``"locations[0].latitude"``.
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class UpstreamError(ToolError):
    """The upstream API returned a non-success response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConnectivityError(ToolError):
    """The upstream API could not be reached (DNS, refused, timed out)."""


class UnknownToolError(ToolError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class DuplicateToolError(ToolError):
    def __init__(self, name: str):
        super().__init__(f"Tool already registered: {name}")
        self.name = name


class RegistryFrozenError(ToolError):
    def __init__(self, name: str):
        super().__init__(f"Registry is frozen; cannot register '{name}'")
        self.name = name


class ConfigError(ToolError):
    """Required configuration is missing or malformed."""
