# =============================================================================
# adapter_core/weather.py  —  National Weather Service Adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fetches observations, forecasts, alerts and station lists from the US
#   National Weather Service API (api.weather.gov) and turns them into short
#   markdown reports.
#
# THE LOCATION CHAIN:
#   The NWS API doesn't forecast for raw coordinates.  Almost every tool
#   first resolves coordinates to a forecast-office grid cell:
#
#       "40.7128,-74.0060"
#         → GET /points/40.7128,-74.006        → {gridId: OKX, gridX: 32, gridY: 34}
#         → GET /gridpoints/OKX/32,34/forecast → periods[...]
#
#   The second request depends on the first, so the calls are sequential.
#
# UNITS:
#   Observations come back in SI (°C, km/h, Pa, m).  Reports show US units
#   first, converted with the helpers below.
# =============================================================================

import logging
import re
from datetime import datetime
from typing import Any

import httpx

from adapter_core.config import AdapterConfig
from adapter_core.errors import ToolError, UpstreamError, ValidationError
from adapter_core.upstream import UpstreamClient

logger = logging.getLogger(__name__)

WEATHER_API_BASE = "https://api.weather.gov"

SEVERITY_LEVELS = ("all", "extreme", "severe", "moderate", "minor")

_COORDINATES = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")
_STATE_CODE = re.compile(r"^[A-Z]{2}$")


# =============================================================================
# Unit conversion
# =============================================================================
def _celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def _kmh_to_mph(kmh: float) -> float:
    return kmh * 0.621371


def _pa_to_inhg(pascals: float) -> float:
    return pascals * 0.0002953


def _meters_to_miles(meters: float) -> float:
    return meters / 1609.34


def _meters_to_feet(meters: float) -> float:
    return meters * 3.28084


def _format_time(timestamp: str | None) -> str:
    """ISO timestamp → 'Jan 05, 2025 03:00 PM' in the timestamp's own offset."""
    if not timestamp:
        return "Unknown"
    try:
        return datetime.fromisoformat(timestamp).strftime("%b %d, %Y %I:%M %p")
    except ValueError:
        return timestamp


def _value(measurement: dict | None) -> float | None:
    """NWS wraps readings as {"value": x, "unitCode": ...}; x may be null."""
    if not measurement:
        return None
    return measurement.get("value")


# =============================================================================
# Location handling
# =============================================================================
def parse_location(location: str) -> tuple[float, float]:
    """Parse 'lat,lng' decimal degrees.

    City names are not geocoded; anything other than coordinates fails.
    """
    match = _COORDINATES.match(location)
    if not match:
        raise ValidationError(
            f'Location parsing not yet implemented for "{location}". Please provide coordinates '
            'in "latitude,longitude" format (e.g., "40.7128,-74.0060")',
            path="location",
        )
    return float(match.group(1)), float(match.group(2))


async def get_point_metadata(client: UpstreamClient, latitude: float, longitude: float) -> dict[str, Any]:
    data = await client.get(f"/points/{latitude},{longitude}")
    return data["properties"]


def _grid_path(point: dict[str, Any]) -> str:
    return f"/gridpoints/{point['gridId']}/{point['gridX']},{point['gridY']}"


# =============================================================================
# Current conditions
# =============================================================================
async def get_current_weather(client: UpstreamClient, location: str) -> str:
    latitude, longitude = parse_location(location)
    point = await get_point_metadata(client, latitude, longitude)

    stations = await client.get(f"{_grid_path(point)}/stations")
    features = stations.get("features") or []
    if not features:
        raise UpstreamError("No weather stations found for this location")

    station_id = features[0]["properties"]["stationIdentifier"]
    observation = await client.get(f"/stations/{station_id}/observations/latest")
    return format_observation(observation["properties"], latitude, longitude, station_id)


def format_observation(obs: dict[str, Any], latitude: float, longitude: float, station_id: str) -> str:
    lines = [
        "# Current Weather",
        "",
        f"**Location:** {latitude}, {longitude}",
        f"**Station:** {station_id}",
        f"**Observed:** {_format_time(obs.get('timestamp'))}",
        "",
    ]

    temperature = _value(obs.get("temperature"))
    if temperature is not None:
        lines.append(f"**Temperature:** {_celsius_to_fahrenheit(temperature):.1f}°F ({temperature:.1f}°C)")

    heat_index = _value(obs.get("heatIndex"))
    wind_chill = _value(obs.get("windChill"))
    if heat_index is not None:
        lines.append(f"**Feels Like:** {_celsius_to_fahrenheit(heat_index):.1f}°F (heat index)")
    elif wind_chill is not None:
        lines.append(f"**Feels Like:** {_celsius_to_fahrenheit(wind_chill):.1f}°F (wind chill)")

    if obs.get("textDescription"):
        lines.append(f"**Conditions:** {obs['textDescription']}")

    humidity = _value(obs.get("relativeHumidity"))
    if humidity is not None:
        lines.append(f"**Humidity:** {humidity:.0f}%")

    wind_speed = _value(obs.get("windSpeed"))
    wind_direction = _value(obs.get("windDirection"))
    if wind_speed is not None and wind_direction is not None:
        lines.append(f"**Wind:** {_kmh_to_mph(wind_speed):.0f} mph from {wind_direction:.0f}°")

    pressure = _value(obs.get("barometricPressure"))
    if pressure is not None:
        lines.append(f"**Pressure:** {_pa_to_inhg(pressure):.2f} inHg")

    visibility = _value(obs.get("visibility"))
    if visibility is not None:
        lines.append(f"**Visibility:** {_meters_to_miles(visibility):.1f} miles")

    return "\n".join(lines) + "\n"


# =============================================================================
# Forecasts
# =============================================================================
async def get_forecast(client: UpstreamClient, location: str, days: int = 7) -> str:
    latitude, longitude = parse_location(location)
    point = await get_point_metadata(client, latitude, longitude)

    forecast = await client.get(f"{_grid_path(point)}/forecast")
    properties = forecast["properties"]
    # Each day is a day period plus a night period.
    periods = properties.get("periods", [])[: days * 2]

    parts = [
        f"# {days}-Day Weather Forecast\n\n",
        f"**Location:** {latitude}, {longitude}\n",
        f"**Updated:** {_format_time(properties.get('updateTime'))}\n\n",
    ]
    for period in periods:
        parts.append(f"## {period['name']}\n\n")
        parts.append(f"**Temperature:** {period['temperature']}°{period['temperatureUnit']}\n")
        parts.append(f"**Conditions:** {period['shortForecast']}\n")

        precipitation = _value(period.get("probabilityOfPrecipitation"))
        if precipitation:
            parts.append(f"**Precipitation:** {precipitation}% chance\n")

        if period.get("windSpeed") and period.get("windDirection"):
            parts.append(f"**Wind:** {period['windSpeed']} {period['windDirection']}\n")

        parts.append(f"\n{period.get('detailedForecast', '')}\n\n---\n\n")
    return "".join(parts)


async def get_hourly_forecast(client: UpstreamClient, location: str, hours: int = 24) -> str:
    latitude, longitude = parse_location(location)
    point = await get_point_metadata(client, latitude, longitude)

    forecast = await client.get(f"{_grid_path(point)}/forecast/hourly")
    properties = forecast["properties"]
    periods = properties.get("periods", [])[:hours]

    parts = [
        f"# {hours}-Hour Weather Forecast\n\n",
        f"**Location:** {latitude}, {longitude}\n",
        f"**Updated:** {_format_time(properties.get('updateTime'))}\n\n",
    ]
    for period in periods:
        start = datetime.fromisoformat(period["startTime"])
        line = (
            f"**{start.strftime('%I %p').lstrip('0')} ({start.strftime('%m/%d/%Y')})** - "
            f"{period['temperature']}°{period['temperatureUnit']} - {period['shortForecast']}"
        )
        precipitation = _value(period.get("probabilityOfPrecipitation"))
        if precipitation:
            line += f" - {precipitation}% rain"
        parts.append(line + "\n")
    return "".join(parts)


# =============================================================================
# Alerts
# =============================================================================
def alerts_query(location: str) -> tuple[str, dict[str, str] | None]:
    """Pick the alerts endpoint for a state code, coordinates, or anything else."""
    if _STATE_CODE.match(location):
        return f"/alerts/active/area/{location}", None
    try:
        latitude, longitude = parse_location(location)
    except ValidationError:
        # Not a state or coordinates: fall back to every active alert.
        return "/alerts/active", None
    return "/alerts/active", {"point": f"{latitude},{longitude}"}


async def get_alerts(client: UpstreamClient, location: str, severity: str = "all") -> str:
    path, params = alerts_query(location)
    data = await client.get(path, params=params)
    alerts = data.get("features") or []

    if severity != "all":
        alerts = [a for a in alerts if (a["properties"].get("severity") or "").lower() == severity]

    if not alerts:
        return f"# Weather Alerts\n\nNo active weather alerts found for {location}."

    parts = [f"# Weather Alerts for {location}\n\n", f"Found {len(alerts)} active alert(s)\n\n"]
    for alert in alerts:
        props = alert["properties"]
        parts.append(f"## {props['event']}\n\n")
        parts.append(f"**Severity:** {props.get('severity')}\n")
        parts.append(f"**Urgency:** {props.get('urgency')}\n")
        parts.append(f"**Areas:** {props.get('areaDesc')}\n")
        if props.get("effective"):
            parts.append(f"**Effective:** {_format_time(props['effective'])}\n")
        if props.get("expires"):
            parts.append(f"**Expires:** {_format_time(props['expires'])}\n")
        parts.append(f"\n**Description:**\n{props.get('description', '')}\n\n")
        if props.get("instruction"):
            parts.append(f"**Instructions:**\n{props['instruction']}\n\n")
        parts.append("---\n\n")
    return "".join(parts)


# =============================================================================
# Stations
# =============================================================================
async def find_stations(client: UpstreamClient, location: str, limit: int = 10) -> str:
    latitude, longitude = parse_location(location)
    point = await get_point_metadata(client, latitude, longitude)

    data = await client.get(f"{_grid_path(point)}/stations", params={"limit": limit})
    stations = data.get("features") or []
    if not stations:
        return f"# Weather Stations\n\nNo weather stations found near {location}."

    parts = [f"# Weather Stations Near {location}\n\n", f"Found {len(stations)} station(s)\n\n"]
    for station in stations:
        props = station["properties"]
        parts.append(f"## {props['name']}\n\n")
        parts.append(f"**Station ID:** {props['stationIdentifier']}\n")

        elevation = _value(props.get("elevation"))
        if elevation:
            parts.append(f"**Elevation:** {_meters_to_feet(elevation):.0f} ft\n")

        distance = _value(props.get("distance"))
        if distance:
            parts.append(f"**Distance:** {_meters_to_miles(distance):.1f} miles\n")

        parts.append(await _latest_report(client, props["stationIdentifier"]))
        parts.append("\n---\n\n")
    return "".join(parts)


async def _latest_report(client: UpstreamClient, station_id: str) -> str:
    """Best effort: a station without a recent observation doesn't fail the tool."""
    try:
        data = await client.get(f"/stations/{station_id}/observations/latest")
    except ToolError as e:
        logger.info("No latest observation for %s: %s", station_id, e.message)
        return "**Latest Report:** Not available\n"

    obs = data.get("properties") if isinstance(data, dict) else None
    if not obs:
        return "**Latest Report:** Not available\n"

    report = f"**Latest Report:** {_format_time(obs.get('timestamp'))}\n"
    temperature = _value(obs.get("temperature"))
    if temperature is not None:
        report += f"**Temperature:** {_celsius_to_fahrenheit(temperature):.1f}°F\n"
    return report


# =============================================================================
# Client construction
# =============================================================================
def create_client(config: AdapterConfig, transport: httpx.AsyncBaseTransport | None = None) -> UpstreamClient:
    """NWS needs no key, only an identifying User-Agent."""
    return UpstreamClient(
        WEATHER_API_BASE,
        label="weather service",
        headers={"User-Agent": config.user_agent, "Accept": "application/geo+json"},
        timeout=config.timeout,
        not_found_message="Location not found or no data available",
        unavailable_message="Weather service temporarily unavailable",
        transport=transport,
    )
