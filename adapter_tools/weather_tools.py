# =============================================================================
# adapter_tools/weather_tools.py  —  Weather Server Tool Declarations
# =============================================================================
#
# Each tool below is a thin wrapper around an adapter_core.weather function:
# it declares the input schema the envelope validates against and forwards
# the validated arguments, together with the server's one UpstreamClient.
#
# The descriptions are read by the calling model to decide WHEN to call a
# tool, so they say what comes back, not how it is computed.
# =============================================================================

from adapter_core import schema as s
from adapter_core import weather
from adapter_core.registry import ToolRegistry
from adapter_core.upstream import UpstreamClient

LOCATION = s.String('Coordinates as "latitude,longitude" in decimal degrees (e.g. "40.7128,-74.0060")')


def register_weather_tools(registry: ToolRegistry, client: UpstreamClient) -> ToolRegistry:
    @registry.tool(
        "get_current_weather",
        "Get current weather conditions for a location in the United States. Shows the latest "
        "observation from the nearest weather station: temperature, humidity, wind, pressure "
        "and visibility.",
        s.Object({"location": LOCATION}),
    )
    async def get_current_weather(location):
        return await weather.get_current_weather(client, location)

    @registry.tool(
        "get_weather_forecast",
        "Get a multi-day weather forecast for a location in the United States. Each day has a "
        "daytime and a nighttime period with temperature, conditions, precipitation chance and wind.",
        s.Object(
            {
                "location": LOCATION,
                "days": s.Optional(s.Number("Number of days to forecast (1-7)", integer=True), default=7),
            }
        ),
    )
    async def get_weather_forecast(location, days):
        return await weather.get_forecast(client, location, days)

    @registry.tool(
        "get_hourly_forecast",
        "Get an hour-by-hour weather forecast for a location in the United States.",
        s.Object(
            {
                "location": LOCATION,
                "hours": s.Optional(s.Number("Number of hours to forecast (1-156)", integer=True), default=24),
            }
        ),
    )
    async def get_hourly_forecast(location, hours):
        return await weather.get_hourly_forecast(client, location, hours)

    @registry.tool(
        "get_weather_alerts",
        "Get active weather alerts (warnings, watches, advisories) for a US state code such as "
        '"CA", for coordinates, or nationwide when the location is neither.',
        s.Object(
            {
                "location": s.String('Two-letter US state code (e.g. "FL") or "latitude,longitude"'),
                "severity": s.Optional(
                    s.Enum(weather.SEVERITY_LEVELS, "Only return alerts of this severity"),
                    default="all",
                ),
            }
        ),
    )
    async def get_weather_alerts(location, severity):
        return await weather.get_alerts(client, location, severity)

    @registry.tool(
        "find_weather_stations",
        "Find weather observation stations near a location in the United States, with "
        "elevation, distance and the latest reported temperature.",
        s.Object(
            {
                "location": LOCATION,
                "limit": s.Optional(s.Number("Maximum number of stations to return", integer=True), default=10),
            }
        ),
    )
    async def find_weather_stations(location, limit):
        return await weather.find_stations(client, location, limit)

    return registry
