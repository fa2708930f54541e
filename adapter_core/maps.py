# =============================================================================
# adapter_core/maps.py  —  Google Maps Platform Adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Geocoding, place search/details, distance matrix, elevation and
#   directions against the Google Maps web-service APIs.  Every function
#   returns a plain dict trimmed down to the fields a caller reasons about;
#   the envelope pretty-prints it as JSON.
#
# IN-BAND ERRORS:
#   Google answers most failures with HTTP 200 and a body like
#       {"status": "REQUEST_DENIED", "error_message": "..."}
#   so _check() turns any status other than "OK" into an UpstreamError.
#
# CREDENTIAL:
#   The API key rides along as the `key` query parameter on every request;
#   it is attached once, in create_client().
# =============================================================================

from typing import Any

import httpx

from adapter_core.config import AdapterConfig
from adapter_core.errors import UpstreamError
from adapter_core.upstream import UpstreamClient

MAPS_API_BASE = "https://maps.googleapis.com/maps/api"

TRAVEL_MODES = ("driving", "walking", "bicycling", "transit")


def create_client(config: AdapterConfig, transport: httpx.AsyncBaseTransport | None = None) -> UpstreamClient:
    return UpstreamClient(
        MAPS_API_BASE,
        label="Google Maps API",
        params={"key": config.credential},
        timeout=config.timeout,
        transport=transport,
    )


def _check(data: dict[str, Any], operation: str) -> dict[str, Any]:
    if data.get("status") != "OK":
        raise UpstreamError(f"{operation} failed: {data.get('error_message') or data.get('status')}")
    return data


def _latlng(point: dict[str, float]) -> str:
    return f"{point['latitude']},{point['longitude']}"


# =============================================================================
# Geocoding
# =============================================================================
async def geocode(client: UpstreamClient, address: str) -> dict[str, Any]:
    data = _check(await client.get("/geocode/json", params={"address": address}), "Geocoding")
    first = data["results"][0]
    return {
        "location": first["geometry"]["location"],
        "formatted_address": first["formatted_address"],
        "place_id": first["place_id"],
    }


async def reverse_geocode(client: UpstreamClient, latitude: float, longitude: float) -> dict[str, Any]:
    data = _check(
        await client.get("/geocode/json", params={"latlng": f"{latitude},{longitude}"}),
        "Reverse geocoding",
    )
    first = data["results"][0]
    return {
        "formatted_address": first["formatted_address"],
        "place_id": first["place_id"],
        "address_components": first["address_components"],
    }


# =============================================================================
# Places
# =============================================================================
async def search_places(
    client: UpstreamClient,
    query: str,
    location: dict[str, float] | None = None,
    radius: float | None = None,
) -> dict[str, Any]:
    params = {
        "query": query,
        "location": _latlng(location) if location else None,
        "radius": radius or None,
    }
    data = _check(await client.get("/place/textsearch/json", params=params), "Place search")
    return {
        "places": [
            {
                "name": place["name"],
                "formatted_address": place.get("formatted_address"),
                "location": place["geometry"]["location"],
                "place_id": place["place_id"],
                "rating": place.get("rating"),
                "types": place.get("types", []),
            }
            for place in data["results"]
        ]
    }


async def place_details(client: UpstreamClient, place_id: str) -> dict[str, Any]:
    data = _check(
        await client.get("/place/details/json", params={"place_id": place_id}),
        "Place details request",
    )
    result = data["result"]
    return {
        "name": result["name"],
        "formatted_address": result.get("formatted_address"),
        "location": result["geometry"]["location"],
        "formatted_phone_number": result.get("formatted_phone_number"),
        "website": result.get("website"),
        "rating": result.get("rating"),
        "reviews": result.get("reviews"),
        "opening_hours": result.get("opening_hours"),
    }


# =============================================================================
# Distances, elevation, directions
# =============================================================================
async def distance_matrix(
    client: UpstreamClient,
    origins: list[str],
    destinations: list[str],
    mode: str = "driving",
) -> dict[str, Any]:
    params = {"origins": "|".join(origins), "destinations": "|".join(destinations), "mode": mode}
    data = _check(await client.get("/distancematrix/json", params=params), "Distance matrix request")
    return {
        "origin_addresses": data["origin_addresses"],
        "destination_addresses": data["destination_addresses"],
        "results": [
            {
                "elements": [
                    {
                        "status": element["status"],
                        "duration": element.get("duration"),
                        "distance": element.get("distance"),
                    }
                    for element in row["elements"]
                ]
            }
            for row in data["rows"]
        ],
    }


async def elevation(client: UpstreamClient, locations: list[dict[str, float]]) -> dict[str, Any]:
    params = {"locations": "|".join(_latlng(loc) for loc in locations)}
    data = _check(await client.get("/elevation/json", params=params), "Elevation request")
    return {
        "results": [
            {
                "elevation": result["elevation"],
                "location": result["location"],
                "resolution": result.get("resolution"),
            }
            for result in data["results"]
        ]
    }


async def directions(
    client: UpstreamClient,
    origin: str,
    destination: str,
    mode: str = "driving",
) -> dict[str, Any]:
    params = {"origin": origin, "destination": destination, "mode": mode}
    data = _check(await client.get("/directions/json", params=params), "Directions request")

    routes = []
    for route in data["routes"]:
        # Only the first leg: requests here never carry waypoints.
        leg = route["legs"][0]
        routes.append(
            {
                "summary": route.get("summary"),
                "distance": leg["distance"],
                "duration": leg["duration"],
                "steps": [
                    {
                        "instructions": step.get("html_instructions"),
                        "distance": step["distance"],
                        "duration": step["duration"],
                        "travel_mode": step.get("travel_mode"),
                    }
                    for step in leg["steps"]
                ],
            }
        )
    return {"routes": routes}
