"""Tests for the Google Maps server tools."""

import json

import pytest

GEOCODE = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA 94043, USA",
            "geometry": {"location": {"lat": 37.422, "lng": -122.084}},
            "place_id": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA",
            "address_components": [],
        }
    ],
}

DIRECTIONS = {
    "status": "OK",
    "routes": [
        {
            "summary": "US-101 S",
            "legs": [
                {
                    "distance": {"text": "48.5 mi", "value": 78053},
                    "duration": {"text": "52 mins", "value": 3120},
                    "steps": [
                        {
                            "html_instructions": "Head <b>south</b>",
                            "distance": {"text": "0.2 mi", "value": 322},
                            "duration": {"text": "1 min", "value": 60},
                            "travel_mode": "DRIVING",
                        }
                    ],
                }
            ],
        }
    ],
}


class TestGeocoding:
    @pytest.mark.asyncio
    async def test_geocode(self, stub, maps_registry):
        stub.add("GET", "/maps/api/geocode/json", GEOCODE)

        result = await maps_registry.invoke("maps_geocode", {"address": "1600 Amphitheatre Parkway"})

        assert json.loads(result.text) == {
            "location": {"lat": 37.422, "lng": -122.084},
            "formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA 94043, USA",
            "place_id": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA",
        }
        params = stub.requests[0].url.params
        assert params["key"] == "test-token"
        assert params["address"] == "1600 Amphitheatre Parkway"

    @pytest.mark.asyncio
    async def test_in_band_error_status(self, stub, maps_registry):
        stub.add("GET", "/maps/api/geocode/json", {"status": "REQUEST_DENIED", "error_message": "Invalid key"})

        result = await maps_registry.invoke("maps_geocode", {"address": "x"})

        assert result.text == "Error: Geocoding failed: Invalid key"

    @pytest.mark.asyncio
    async def test_zero_results_uses_status(self, stub, maps_registry):
        stub.add("GET", "/maps/api/geocode/json", {"status": "ZERO_RESULTS", "results": []})
        result = await maps_registry.invoke("maps_reverse_geocode", {"latitude": 0, "longitude": 0})
        assert result.text == "Error: Reverse geocoding failed: ZERO_RESULTS"
        assert stub.requests[0].url.params["latlng"] == "0,0"


class TestTravelMode:
    @pytest.mark.asyncio
    async def test_unknown_mode_fails_before_any_call(self, stub, maps_registry):
        result = await maps_registry.invoke(
            "maps_directions", {"origin": "A", "destination": "B", "mode": "flying"}
        )

        assert result.is_error
        assert "driving, walking, bicycling, transit" in result.text
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_mode_defaults_to_driving(self, stub, maps_registry):
        stub.add("GET", "/maps/api/directions/json", DIRECTIONS)

        result = await maps_registry.invoke("maps_directions", {"origin": "A", "destination": "B"})

        assert stub.requests[0].url.params["mode"] == "driving"
        route = json.loads(result.text)["routes"][0]
        assert route["summary"] == "US-101 S"
        assert route["steps"][0]["instructions"] == "Head <b>south</b>"

    @pytest.mark.asyncio
    async def test_extra_field_is_ignored(self, stub, maps_registry):
        stub.add("GET", "/maps/api/directions/json", DIRECTIONS)

        plain = await maps_registry.invoke("maps_directions", {"origin": "A", "destination": "B"})
        extra = await maps_registry.invoke(
            "maps_directions", {"origin": "A", "destination": "B", "avoid": "tolls"}
        )

        assert plain == extra
        assert str(stub.requests[0].url) == str(stub.requests[1].url)


class TestMatrixAndElevation:
    @pytest.mark.asyncio
    async def test_distance_matrix_joins_with_pipes(self, stub, maps_registry):
        stub.add(
            "GET",
            "/maps/api/distancematrix/json",
            {
                "status": "OK",
                "origin_addresses": ["Boston, MA, USA"],
                "destination_addresses": ["New York, NY, USA", "Albany, NY, USA"],
                "rows": [
                    {
                        "elements": [
                            {"status": "OK", "distance": {"value": 1}, "duration": {"value": 2}},
                            {"status": "NOT_FOUND"},
                        ]
                    }
                ],
            },
        )

        result = await maps_registry.invoke(
            "maps_distance_matrix",
            {"origins": ["Boston"], "destinations": ["New York", "Albany"], "mode": "transit"},
        )

        params = stub.requests[0].url.params
        assert params["destinations"] == "New York|Albany"
        assert params["mode"] == "transit"
        elements = json.loads(result.text)["results"][0]["elements"]
        assert elements[1] == {"status": "NOT_FOUND", "duration": None, "distance": None}

    @pytest.mark.asyncio
    async def test_elevation_location_list(self, stub, maps_registry):
        stub.add(
            "GET",
            "/maps/api/elevation/json",
            {"status": "OK", "results": [{"elevation": 1608.6, "location": {"lat": 39.7, "lng": -104.9}}]},
        )

        await maps_registry.invoke(
            "maps_elevation",
            {"locations": [{"latitude": 39.7, "longitude": -104.9}, {"latitude": 36.5, "longitude": -117.0}]},
        )

        assert stub.requests[0].url.params["locations"] == "39.7,-104.9|36.5,-117.0"

    @pytest.mark.asyncio
    async def test_elevation_rejects_bad_location(self, stub, maps_registry):
        result = await maps_registry.invoke("maps_elevation", {"locations": [{"latitude": "high"}]})
        assert result.text.startswith("Error: Invalid value for 'locations[0].latitude'")
        assert stub.requests == []


class TestPlaces:
    @pytest.mark.asyncio
    async def test_search_with_location_bias(self, stub, maps_registry):
        stub.add(
            "GET",
            "/maps/api/place/textsearch/json",
            {
                "status": "OK",
                "results": [
                    {
                        "name": "Blue Bottle",
                        "formatted_address": "1 Ferry Building",
                        "geometry": {"location": {"lat": 1, "lng": 2}},
                        "place_id": "abc",
                        "rating": 4.5,
                        "types": ["cafe"],
                    }
                ],
            },
        )

        result = await maps_registry.invoke(
            "maps_search_places",
            {"query": "coffee", "location": {"latitude": 37.79, "longitude": -122.39}, "radius": 500},
        )

        params = stub.requests[0].url.params
        assert params["location"] == "37.79,-122.39"
        assert params["radius"] == "500"
        assert json.loads(result.text)["places"][0]["name"] == "Blue Bottle"

    @pytest.mark.asyncio
    async def test_search_without_location(self, stub, maps_registry):
        stub.add("GET", "/maps/api/place/textsearch/json", {"status": "OK", "results": []})
        await maps_registry.invoke("maps_search_places", {"query": "coffee"})

        params = stub.requests[0].url.params
        assert "location" not in params
        assert "radius" not in params
