# =============================================================================
# adapter_tools/maps_tools.py  —  Google Maps Server Tool Declarations
# =============================================================================

from adapter_core import maps
from adapter_core import schema as s
from adapter_core.registry import ToolRegistry
from adapter_core.upstream import UpstreamClient

LAT_LNG = s.Object(
    {
        "latitude": s.Number("Latitude in decimal degrees"),
        "longitude": s.Number("Longitude in decimal degrees"),
    }
)

MODE = s.Optional(s.Enum(maps.TRAVEL_MODES, "Travel mode"), default="driving")


def register_maps_tools(registry: ToolRegistry, client: UpstreamClient) -> ToolRegistry:
    @registry.tool(
        "maps_geocode",
        "Convert an address into geographic coordinates",
        s.Object({"address": s.String("The address to geocode")}),
    )
    async def maps_geocode(address):
        return await maps.geocode(client, address)

    @registry.tool(
        "maps_reverse_geocode",
        "Convert coordinates into an address",
        s.Object(
            {
                "latitude": s.Number("Latitude coordinate"),
                "longitude": s.Number("Longitude coordinate"),
            }
        ),
    )
    async def maps_reverse_geocode(latitude, longitude):
        return await maps.reverse_geocode(client, latitude, longitude)

    @registry.tool(
        "maps_search_places",
        "Search for places using a text query, optionally biased towards a location",
        s.Object(
            {
                "query": s.String("Search query"),
                "location": s.Optional(LAT_LNG),
                "radius": s.Optional(s.Number("Search radius in meters (max 50000)")),
            }
        ),
    )
    async def maps_search_places(query, location, radius):
        return await maps.search_places(client, query, location, radius)

    @registry.tool(
        "maps_place_details",
        "Get detailed information about a specific place: phone, website, rating, reviews, opening hours",
        s.Object({"place_id": s.String("The place ID to get details for")}),
    )
    async def maps_place_details(place_id):
        return await maps.place_details(client, place_id)

    @registry.tool(
        "maps_distance_matrix",
        "Calculate travel distance and time for multiple origins and destinations",
        s.Object(
            {
                "origins": s.Array(s.String(), "Array of origin addresses or coordinates"),
                "destinations": s.Array(s.String(), "Array of destination addresses or coordinates"),
                "mode": MODE,
            }
        ),
    )
    async def maps_distance_matrix(origins, destinations, mode):
        return await maps.distance_matrix(client, origins, destinations, mode)

    @registry.tool(
        "maps_elevation",
        "Get elevation data for locations on the earth",
        s.Object({"locations": s.Array(LAT_LNG, "Array of locations to get elevation for")}),
    )
    async def maps_elevation(locations):
        return await maps.elevation(client, locations)

    @registry.tool(
        "maps_directions",
        "Get directions between two points",
        s.Object(
            {
                "origin": s.String("Starting point address or coordinates"),
                "destination": s.String("Ending point address or coordinates"),
                "mode": MODE,
            }
        ),
    )
    async def maps_directions(origin, destination, mode):
        return await maps.directions(client, origin, destination, mode)

    return registry
