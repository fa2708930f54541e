# =============================================================================
# adapter_core/schema.py  —  Input Schemas & Validation
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares the parameters a tool accepts and checks raw caller input
#   against them.  A schema is a small tree of tagged variants:
#
#       String | Number | Boolean | Enum[...] | Object{...} | Array[T]
#       | Optional[T, default]
#
#   and there is exactly one function that walks it: validate().
#
# HOW TOOLS USE IT (typical declaration):
#
#       from adapter_core import schema as s
#
#       s.Object({
#           "location": s.String("US location as 'lat,lng'"),
#           "days": s.Optional(s.Number("Days to forecast", integer=True), default=7),
#       })
#
# VALIDATION RULES:
#   - required key missing              → Failure naming the key
#   - wrong type                        → Failure naming key, expected, got
#   - enum value outside its literals   → Failure listing the literals
#   - optional key missing (or null)    → default substituted (None if none)
#   - unknown keys on an Object         → silently dropped (kept when open)
#
# The same tree renders to JSON Schema (to_json_schema) so the server facade
# can advertise it to callers.
# =============================================================================

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping

from adapter_core.models import Failure, Result, Success

_MISSING = object()


@dataclass(frozen=True)
class String:
    description: str = ""


@dataclass(frozen=True)
class Number:
    description: str = ""
    integer: bool = False


@dataclass(frozen=True)
class Boolean:
    description: str = ""


@dataclass(frozen=True)
class Enum:
    values: tuple[str, ...]
    description: str = ""

    def __post_init__(self):
        # Accept any iterable of literals but store an immutable tuple.
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class Array:
    items: "Schema"
    description: str = ""


@dataclass(frozen=True)
class Object:
    fields: Mapping[str, "Schema"] = field(default_factory=dict)
    description: str = ""
    # Open objects keep undeclared keys as-is (free-form payloads).
    open: bool = False


@dataclass(frozen=True)
class Optional:
    inner: "Schema"
    default: Any = None

    @property
    def description(self) -> str:
        return self.inner.description


Schema = String | Number | Boolean | Enum | Array | Object | Optional


# =============================================================================
# validate
# =============================================================================
def validate(schema: Schema, value: Any, path: str = "") -> Result:
    """Check ``value`` against ``schema``.

    Returns ``Success(cleaned_value)`` with defaults applied and unknown
    object keys dropped, or ``Failure(message, path)`` for the first problem
    found.
    """
    label = path or "input"

    if isinstance(schema, Optional):
        if value is None:
            return Success(copy.deepcopy(schema.default))
        return validate(schema.inner, value, path)

    if value is None:
        return Failure(f"Invalid value for '{label}': expected {_type_name(schema)}, got null", path)

    if isinstance(schema, String):
        if not isinstance(value, str):
            return _mismatch(schema, value, path)
        return Success(value)

    if isinstance(schema, Number):
        # bool is an int subclass in Python; a JSON true is not a number.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _mismatch(schema, value, path)
        if schema.integer:
            if isinstance(value, float):
                if not value.is_integer():
                    return Failure(f"Invalid value for '{label}': expected integer, got {value!r}", path)
                value = int(value)
        return Success(value)

    if isinstance(schema, Boolean):
        if not isinstance(value, bool):
            return _mismatch(schema, value, path)
        return Success(value)

    if isinstance(schema, Enum):
        if not isinstance(value, str) or value not in schema.values:
            allowed = ", ".join(schema.values)
            return Failure(f"Invalid value for '{label}': expected one of {allowed}, got {value!r}", path)
        return Success(value)

    if isinstance(schema, Array):
        if not isinstance(value, (list, tuple)):
            return _mismatch(schema, value, path)
        cleaned = []
        for index, item in enumerate(value):
            result = validate(schema.items, item, f"{path}[{index}]" if path else f"[{index}]")
            if isinstance(result, Failure):
                return result
            cleaned.append(result.value)
        return Success(cleaned)

    if isinstance(schema, Object):
        if not isinstance(value, Mapping):
            return _mismatch(schema, value, path)
        cleaned = {}
        for key, child in schema.fields.items():
            child_path = f"{path}.{key}" if path else key
            raw = value.get(key, _MISSING)
            if raw is _MISSING:
                if isinstance(child, Optional):
                    cleaned[key] = copy.deepcopy(child.default)
                    continue
                return Failure(f"Missing required parameter '{child_path}'", child_path)
            result = validate(child, raw, child_path)
            if isinstance(result, Failure):
                return result
            cleaned[key] = result.value
        if schema.open:
            for key, raw in value.items():
                cleaned.setdefault(key, copy.deepcopy(raw))
        return Success(cleaned)

    raise TypeError(f"Unsupported schema node: {schema!r}")


def _mismatch(schema: Schema, value: Any, path: str) -> Failure:
    label = path or "input"
    return Failure(
        f"Invalid value for '{label}': expected {_type_name(schema)}, got {_json_type(value)}",
        path,
    )


def _type_name(schema: Schema) -> str:
    if isinstance(schema, Optional):
        return _type_name(schema.inner)
    if isinstance(schema, Number):
        return "integer" if schema.integer else "number"
    if isinstance(schema, Enum):
        return "one of " + ", ".join(schema.values)
    if isinstance(schema, Array):
        return f"array of {_type_name(schema.items)}"
    return {String: "string", Boolean: "boolean", Object: "object"}[type(schema)]


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


# =============================================================================
# JSON Schema rendering (for discovery over MCP)
# =============================================================================
def to_json_schema(schema: Schema) -> dict[str, Any]:
    """Render a schema tree as a JSON Schema document."""
    if isinstance(schema, Optional):
        rendered = to_json_schema(schema.inner)
        if schema.default is not None:
            rendered["default"] = schema.default
        return rendered

    if isinstance(schema, String):
        rendered = {"type": "string"}
    elif isinstance(schema, Number):
        rendered = {"type": "integer" if schema.integer else "number"}
    elif isinstance(schema, Boolean):
        rendered = {"type": "boolean"}
    elif isinstance(schema, Enum):
        rendered = {"type": "string", "enum": list(schema.values)}
    elif isinstance(schema, Array):
        rendered = {"type": "array", "items": to_json_schema(schema.items)}
    elif isinstance(schema, Object):
        rendered = {
            "type": "object",
            "properties": {key: to_json_schema(child) for key, child in schema.fields.items()},
        }
        required = [key for key, child in schema.fields.items() if not isinstance(child, Optional)]
        if required:
            rendered["required"] = required
        if schema.open:
            rendered["additionalProperties"] = True
    else:
        raise TypeError(f"Unsupported schema node: {schema!r}")

    if schema.description:
        rendered["description"] = schema.description
    return rendered
