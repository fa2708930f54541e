"""Tests for input schema validation and JSON Schema rendering."""

from adapter_core import schema as s
from adapter_core.models import Failure, Success

FORECAST = s.Object(
    {
        "location": s.String("lat,lng"),
        "days": s.Optional(s.Number("days", integer=True), default=7),
    }
)


class TestValidateObject:
    def test_applies_default_for_omitted_optional(self):
        result = s.validate(FORECAST, {"location": "40.7,-74.0"})
        assert result == Success({"location": "40.7,-74.0", "days": 7})

    def test_explicit_null_optional_gets_default(self):
        result = s.validate(FORECAST, {"location": "x", "days": None})
        assert result.value["days"] == 7

    def test_optional_without_default_is_none(self):
        schema = s.Object({"q": s.String(), "sort": s.Optional(s.String())})
        assert s.validate(schema, {"q": "a"}).value == {"q": "a", "sort": None}

    def test_missing_required_names_parameter(self):
        result = s.validate(FORECAST, {"days": 2})
        assert isinstance(result, Failure)
        assert result.message == "Missing required parameter 'location'"
        assert result.path == "location"

    def test_unknown_keys_are_dropped(self):
        result = s.validate(FORECAST, {"location": "x", "units": "metric"})
        assert result.value == {"location": "x", "days": 7}

    def test_open_object_keeps_unknown_keys(self):
        schema = s.Object({"properties": s.Object(open=True)})
        payload = {"properties": {"Status": {"select": {"name": "Done"}}}}
        assert s.validate(schema, payload).value == payload

    def test_non_mapping_input(self):
        result = s.validate(FORECAST, ["location"])
        assert result.message == "Invalid value for 'input': expected object, got array"

    def test_default_is_not_shared_between_calls(self):
        schema = s.Object({"tags": s.Optional(s.Array(s.String()), default=[])})
        first = s.validate(schema, {}).value
        first["tags"].append("mutated")
        assert s.validate(schema, {}).value == {"tags": []}


class TestValidateScalars:
    def test_type_mismatch_names_expected_and_got(self):
        result = s.validate(FORECAST, {"location": 42})
        assert result.message == "Invalid value for 'location': expected string, got number"

    def test_boolean_is_not_a_number(self):
        result = s.validate(s.Object({"n": s.Number()}), {"n": True})
        assert result.message == "Invalid value for 'n': expected number, got boolean"

    def test_integer_accepts_integral_float(self):
        assert s.validate(FORECAST, {"location": "x", "days": 3.0}).value["days"] == 3

    def test_integer_rejects_fraction(self):
        result = s.validate(FORECAST, {"location": "x", "days": 2.5})
        assert isinstance(result, Failure)
        assert "expected integer" in result.message

    def test_null_for_required(self):
        result = s.validate(FORECAST, {"location": None})
        assert result.message == "Invalid value for 'location': expected string, got null"

    def test_enum_lists_allowed_values(self):
        schema = s.Object({"mode": s.Enum(("driving", "walking"))})
        result = s.validate(schema, {"mode": "flying"})
        assert result.message == "Invalid value for 'mode': expected one of driving, walking, got 'flying'"


class TestValidateNested:
    def test_array_item_path(self):
        point = s.Object({"latitude": s.Number(), "longitude": s.Number()})
        schema = s.Object({"locations": s.Array(point)})
        result = s.validate(schema, {"locations": [{"latitude": 1, "longitude": 2}, {"latitude": "north"}]})
        assert result.path == "locations[1].latitude"

    def test_nested_missing_required(self):
        schema = s.Object({"files": s.Array(s.Object({"path": s.String(), "content": s.String()}))})
        result = s.validate(schema, {"files": [{"path": "a.txt"}]})
        assert result.message == "Missing required parameter 'files[0].content'"


class TestToJsonSchema:
    def test_object_rendering(self):
        rendered = s.to_json_schema(FORECAST)
        assert rendered == {
            "type": "object",
            "properties": {
                "location": {"type": "string", "description": "lat,lng"},
                "days": {"type": "integer", "default": 7, "description": "days"},
            },
            "required": ["location"],
        }

    def test_enum_and_array(self):
        schema = s.Object({"modes": s.Array(s.Enum(("a", "b")))})
        assert s.to_json_schema(schema)["properties"]["modes"] == {
            "type": "array",
            "items": {"type": "string", "enum": ["a", "b"]},
        }

    def test_open_object_allows_additional_properties(self):
        assert s.to_json_schema(s.Object(open=True))["additionalProperties"] is True
