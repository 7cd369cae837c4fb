import html
from dataclasses import dataclass

import pydeck as pdk

KYIV_CENTER = (50.4501, 30.5234)
DEFAULT_ZOOM = 11
LAYER_ID = "cafes"

STATUS_COLORS = {
    "new": "#28a745",       # green
    "visited": "#007bff",   # blue
    "disliked": "#dc3545",  # red
}


def hex_to_rgb(value: str) -> list[int]:
    value = value.lstrip("#")
    return [int(value[i:i + 2], 16) for i in (0, 2, 4)]


def marker_color(status: str) -> list[int]:
    return hex_to_rgb(STATUS_COLORS.get(status, STATUS_COLORS["new"]))


@dataclass
class Marker:
    cafe: dict
    color: list[int]

    @property
    def cafe_id(self) -> str:
        return self.cafe["id"]

    def set_color_for(self, status: str):
        self.color = marker_color(status)

    def to_row(self) -> dict:
        return {
            "id": self.cafe["id"],
            # deck.gl inserts tooltip fields as HTML
            "name": html.escape(self.cafe.get("name", "")),
            "address": html.escape(self.cafe.get("address", "")),
            "status": self.cafe.get("status", "new"),
            "lat": self.cafe["lat"],
            "lon": self.cafe["lon"],
            "color": self.color,
        }


class MarkerLayer:
    """Holds the markers currently on the map and renders them as a pydeck deck."""

    def __init__(self, center: tuple[float, float] = KYIV_CENTER, zoom: int = DEFAULT_ZOOM):
        self.center = center
        self.zoom = zoom
        self.rows: list[dict] = []

    def sync(self, markers: list[Marker]):
        """Replaces whatever is on the map with markers."""
        self.rows = [marker.to_row() for marker in markers]

    def clear(self):
        self.rows = []

    def build_deck(self) -> pdk.Deck:
        layer = pdk.Layer(
            "ScatterplotLayer",
            id=LAYER_ID,
            data=self.rows,
            get_position=["lon", "lat"],
            get_fill_color="color",
            get_line_color=[255, 255, 255],
            stroked=True,
            line_width_min_pixels=3,
            radius_min_pixels=7,
            radius_max_pixels=12,
            pickable=True,
        )
        view_state = pdk.ViewState(latitude=self.center[0], longitude=self.center[1], zoom=self.zoom, max_zoom=18)
        return pdk.Deck(
            layers=[layer],
            initial_view_state=view_state,
            # Carto basemaps are rendered from OpenStreetMap data and need no token
            map_provider="carto",
            map_style="light",
            tooltip={"html": "<b>{name}</b><br/>{address}"},
        )
