import httpx
import logging
from cafe_map.models.cafe_model import Cafe, CafeStatus, CafesResponse, Counter, ElementType, cafe_key
from cafe_map.core.config import settings
from cafe_map.core.logger import logs

UNNAMED_CAFE = "Unnamed cafe"
NO_ADDRESS = "Address not specified"


class OverpassError(Exception):
    """Raised when the Overpass API cannot be queried."""


def build_query(bbox: tuple[float, float, float, float], timeout: int = 25) -> str:
    """Overpass QL for every cafe node, way and relation inside bbox (south, west, north, east)."""
    area = ",".join(str(coord) for coord in bbox)
    return f"""
    [out:json][timeout:{timeout}];
    (
      node["amenity"="cafe"]({area});
      way["amenity"="cafe"]({area});
      relation["amenity"="cafe"]({area});
    );
    out center;
    """


def format_address(tags: dict | None, street_prefix: str = "вул.") -> str:
    tags = tags or {}
    parts = []
    if tags.get("addr:street"):
        parts.append(f"{street_prefix} {tags['addr:street']}".strip())
    if tags.get("addr:housenumber"):
        parts.append(tags["addr:housenumber"])
    if tags.get("addr:city"):
        parts.append(tags["addr:city"])
    return ", ".join(parts) or NO_ADDRESS


def parse_elements(elements: list[dict], street_prefix: str = "вул.") -> list[Cafe]:
    """
    Turns raw Overpass elements into cafes.
    Nodes carry lat/lon directly; ways and relations only have a center.
    Elements without coordinates are dropped.
    """
    cafes = []
    for element in elements:
        lat = element.get("lat") or element.get("center", {}).get("lat")
        lon = element.get("lon") or element.get("center", {}).get("lon")
        if not lat or not lon:
            continue

        try:
            osm_type = ElementType(element.get("type", ElementType.NODE.value))
        except ValueError:
            continue

        tags = element.get("tags") or {}
        cafes.append(Cafe(
            id=cafe_key(osm_type, element["id"]),
            osm_type=osm_type,
            osm_id=element["id"],
            lat=lat,
            lon=lon,
            name=tags.get("name") or UNNAMED_CAFE,
            address=format_address(tags, street_prefix),
            phone=tags.get("phone", ""),
            website=tags.get("website", ""),
            opening_hours=tags.get("opening_hours", ""),
            cuisine=tags.get("cuisine", ""),
            wifi=tags.get("wifi", ""),
        ))
    return cafes


def merge_statuses(cafes: list[Cafe], statuses: dict[str, str]) -> list[Cafe]:
    """Applies persisted statuses onto freshly parsed cafes. Unknown ids stay NEW."""
    for cafe in cafes:
        cafe.status = CafeStatus.parse(statuses.get(cafe.id, CafeStatus.NEW.value))
    return cafes


def count_visited(cafes: list[Cafe]) -> Counter:
    visited = sum(1 for cafe in cafes if cafe.status == CafeStatus.VISITED)
    return Counter(visited=visited, total=len(cafes))


class CafeService:
    def __init__(self, repo, transport: httpx.AsyncBaseTransport | None = None):
        self.repo = repo
        self.overpass_url = settings.OVERPASS_URL
        self.timeout = settings.OVERPASS_TIMEOUT
        self.bbox = settings.bbox
        self.street_prefix = settings.ADDRESS_STREET_PREFIX
        # Tests swap in httpx.MockTransport here
        self.transport = transport

    async def load_cafes(self) -> CafesResponse:
        source = "cache"
        elements = await self.repo.get_cached_elements()
        if elements is None:
            logs.log(logging.INFO, "✗ Overpass cache MISS. Fetching cafes from Overpass API...")
            elements = await self.fetch_elements()
            await self.repo.cache_elements(elements)
            source = "api"
        else:
            logs.log(logging.INFO, f"✓ Overpass cache HIT ({len(elements)} elements)")

        cafes = parse_elements(elements, self.street_prefix)
        statuses = await self.repo.get_statuses()
        merge_statuses(cafes, statuses)

        counter = count_visited(cafes)
        logs.log(logging.INFO, f"Loaded {counter.total} cafes ({counter.visited} visited) from {source}")
        return CafesResponse(cafes=cafes, counter=counter, source=source)

    async def fetch_elements(self) -> list[dict]:
        query = build_query(self.bbox, self.timeout)

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.post(
                    self.overpass_url,
                    data={"data": query},
                    # Leave the server time to answer before giving up locally
                    timeout=self.timeout + 5.0
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logs.log(logging.ERROR, f"Overpass API returned HTTP {e.response.status_code}")
                raise OverpassError(f"HTTP error! status: {e.response.status_code}") from e
            except (httpx.HTTPError, ValueError) as e:
                logs.log(logging.ERROR, f"Overpass API failed: {str(e)}")
                raise OverpassError(str(e)) from e

        return data.get("elements", [])

    async def set_status(self, cafe_id: str, status: CafeStatus) -> CafeStatus:
        await self.repo.set_status(cafe_id, status)
        logs.log(logging.INFO, f"Cafe {cafe_id} marked as {CafeStatus(status).value}")
        return CafeStatus(status)

    async def get_statuses(self) -> dict[str, str]:
        return await self.repo.get_statuses()
