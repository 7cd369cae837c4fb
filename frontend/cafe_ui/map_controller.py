"""
Client-side state for the cafe map.

CafeMapController keeps the loaded cafes, their markers, the active filter and
the selected cafe, and pushes the visible markers to a MarkerLayer whenever any
of those change. Rendering is left to the Streamlit page.
"""
import logging

from cafe_ui.api_client import BackendError
from cafe_ui.layers import Marker, MarkerLayer, marker_color

logger = logging.getLogger(__name__)

STATUSES = ("new", "visited", "disliked")
FILTERS = ("all",) + STATUSES

LOAD_ERROR = "Failed to load cafés. Check your internet connection."
SAVE_ERROR = "Could not save the status. Please try again."

STATUS_LABELS = {
    "new": "New café",
    "visited": "Visited",
    "disliked": "Disliked",
}


class CafeMapController:
    def __init__(self, client, layer: MarkerLayer | None = None):
        self.client = client
        self.layer = layer or MarkerLayer()
        self.cafes: list[dict] = []
        self.markers: list[Marker] = []
        self.current_filter = "all"
        self.selected_cafe: dict | None = None
        self.loading = False
        self.error: str | None = None
        self.warning: str | None = None
        # Bumped on every close; the page keys its map and search widgets with it
        self.selection_epoch = 0
        self._picked: dict[str, str] = {}

    # ===== Loading =====

    def load(self):
        self.loading = True
        self.error = None
        try:
            payload = self.client.fetch_cafes()
            self.cafes = payload.get("cafes", [])
            self.create_markers()
        except BackendError as e:
            logger.error("Failed to load cafés: %s", e)
            self.error = LOAD_ERROR
        finally:
            self.loading = False

    def retry(self):
        self.error = None
        self.load()

    # ===== Markers =====

    def create_markers(self):
        self.clear_markers()
        self.markers = [Marker(cafe=cafe, color=marker_color(cafe.get("status", "new"))) for cafe in self.cafes]
        self.apply_filter()

    def clear_markers(self):
        self.layer.clear()
        self.markers = []

    def update_marker_icon(self, cafe: dict):
        for marker in self.markers:
            if marker.cafe_id == cafe["id"]:
                marker.set_color_for(cafe["status"])
                return

    def visible_markers(self) -> list[Marker]:
        if self.current_filter not in STATUSES:
            return list(self.markers)
        return [m for m in self.markers if m.cafe.get("status", "new") == self.current_filter]

    def apply_filter(self):
        self.layer.sync(self.visible_markers())

    def set_filter(self, filter_name: str):
        # Anything unrecognised shows every marker, same as "all"
        self.current_filter = filter_name
        self.apply_filter()

    # ===== Selection & status =====

    def find_cafe(self, cafe_id: str) -> dict | None:
        return next((cafe for cafe in self.cafes if cafe["id"] == cafe_id), None)

    def select(self, cafe_id: str) -> dict | None:
        self.selected_cafe = self.find_cafe(cafe_id)
        self.warning = None
        return self.selected_cafe

    def pick(self, source: str, cafe_id: str) -> dict | None:
        """
        Selects cafe_id for a widget (map click, search box) whose value is
        re-reported on every rerun. Only a change of that widget's value selects.
        """
        if self._picked.get(source) == cafe_id:
            return self.selected_cafe
        self._picked[source] = cafe_id
        return self.select(cafe_id)

    def close(self):
        self.selected_cafe = None
        self._picked = {}
        self.selection_epoch += 1

    def set_status(self, status: str):
        if not self.selected_cafe:
            return
        if status not in STATUSES:
            raise ValueError(f"Unknown status: {status}")

        cafe = self.selected_cafe
        try:
            self.client.set_status(cafe["id"], status)
        except BackendError as e:
            logger.error("Failed to save status for cafe %s: %s", cafe["id"], e)
            self.warning = SAVE_ERROR
            return

        cafe["status"] = status
        self.warning = None
        self.update_marker_icon(cafe)
        self.apply_filter()
        self.close()

    # ===== Read-only views =====

    def counter(self) -> tuple[int, int]:
        visited = sum(1 for cafe in self.cafes if cafe.get("status") == "visited")
        return visited, len(self.cafes)

    def counter_text(self) -> str:
        visited, total = self.counter()
        return f"Visited {visited} of {total} cafés"


def detail_lines(cafe: dict) -> list[tuple[str, str]]:
    """Label/value pairs shown in the cafe detail panel. Empty optional fields are skipped."""
    lines = [("Address", cafe.get("address", ""))]
    optional = (
        ("Phone", "phone"),
        ("Opening hours", "opening_hours"),
        ("Cuisine", "cuisine"),
        ("WiFi", "wifi"),
        ("Website", "website"),
    )
    for label, key in optional:
        if cafe.get(key):
            lines.append((label, cafe[key]))
    status = cafe.get("status", "new")
    lines.append(("Status", STATUS_LABELS.get(status, STATUS_LABELS["new"])))
    return lines


MARKDOWN_SPECIAL = set("\\`*_{}[]()<>#+-.!|~")


def escape_markdown(text: str) -> str:
    """Backslash-escapes markdown syntax so OSM tag values render literally."""
    return "".join(f"\\{char}" if char in MARKDOWN_SPECIAL else char for char in str(text))
