from pydantic import BaseModel, Field
from typing import List
from enum import Enum

# --- Enums ---
class CafeStatus(str, Enum):
    NEW = "new"
    VISITED = "visited"
    DISLIKED = "disliked"

    @classmethod
    def parse(cls, value) -> "CafeStatus":
        """Reads a persisted value, falling back to NEW for anything unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEW

class ElementType(str, Enum):
    NODE = "node"
    WAY = "way"
    RELATION = "relation"

class CafeFilter(str, Enum):
    ALL = "all"
    NEW = "new"
    VISITED = "visited"
    DISLIKED = "disliked"

def cafe_key(osm_type: str, osm_id: int) -> str:
    """OSM numbers ids per element type, so identity is "node/5", "way/5", ..."""
    return f"{ElementType(osm_type).value}/{osm_id}"

# --- Domain Models ---
class Cafe(BaseModel):
    id: str
    osm_type: ElementType
    osm_id: int
    lat: float
    lon: float
    name: str
    address: str
    phone: str = ""
    website: str = ""
    opening_hours: str = ""
    cuisine: str = ""
    wifi: str = ""
    status: CafeStatus = CafeStatus.NEW

class Counter(BaseModel):
    visited: int
    total: int

# --- API Request/Response Models ---
class CafesResponse(BaseModel):
    cafes: List[Cafe]
    counter: Counter
    source: str  # "cache" or "api"

class StatusUpdate(BaseModel):
    status: CafeStatus = Field(..., description="New status for the cafe")

class StatusRecord(BaseModel):
    cafe_id: str
    status: CafeStatus
