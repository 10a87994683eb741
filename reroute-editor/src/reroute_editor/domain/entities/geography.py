import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

# (lon, lat) in degrees, GeoJSON axis order
Coord = tuple[float, float]

COORD_EPSILON = 1e-6
EARTH_RADIUS_M = 6_371_008.8


def to_coord(c: Sequence[float]) -> Coord:
    return (float(c[0]), float(c[1]))


def coords_equal(a: Coord, b: Coord, epsilon: float = COORD_EPSILON) -> bool:
    return abs(a[0] - b[0]) <= epsilon and abs(a[1] - b[1]) <= epsilon


def haversine_m(a: Coord, b: Coord) -> float:
    lon0, lat0, lon1, lat1 = map(math.radians, (a[0], a[1], b[0], b[1]))
    h = math.sin((lat1 - lat0) / 2) ** 2 + math.cos(lat0) * math.cos(lat1) * math.sin(
        (lon1 - lon0) / 2
    ) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


# Core geometry types used by the chain
@dataclass(frozen=True)
class Point:
    coordinates: Coord
    type: Literal["Point"] = "Point"

    @property
    def first(self) -> Coord:
        return self.coordinates

    @property
    def last(self) -> Coord:
        return self.coordinates

    def to_geojson(self) -> dict:
        return {"type": "Point", "coordinates": list(self.coordinates)}


@dataclass(frozen=True)
class LineString:
    coordinates: tuple[Coord, ...]
    type: Literal["LineString"] = "LineString"

    def __post_init__(self):
        if len(self.coordinates) < 2:
            raise ValueError(f"LineString needs at least 2 coordinates, got {len(self.coordinates)}")

    @classmethod
    def of(cls, coords: Sequence[Sequence[float]]) -> "LineString":
        return cls(tuple(to_coord(c) for c in coords))

    @property
    def first(self) -> Coord:
        return self.coordinates[0]

    @property
    def last(self) -> Coord:
        return self.coordinates[-1]

    def to_geojson(self) -> dict:
        return {"type": "LineString", "coordinates": [list(c) for c in self.coordinates]}


Geometry = Point | LineString


def geometry_from_geojson(obj: dict) -> Geometry:
    kind = obj.get("type")
    if kind == "Point":
        return Point(to_coord(obj["coordinates"]))
    if kind == "LineString":
        return LineString.of(obj["coordinates"])
    raise ValueError(f"Unsupported geometry type {kind!r}")
