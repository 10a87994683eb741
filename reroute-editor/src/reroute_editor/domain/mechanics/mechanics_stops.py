from dataclasses import dataclass

from reroute_editor.domain.entities.geography import Coord, haversine_m
from reroute_editor.domain.entities.segments import SegmentChain


@dataclass(frozen=True)
class StopDescriptor:
    # boundary index for explicit stops; index of the containing segment when auto_created
    index: int
    lon: float
    lat: float
    stop_id: str | None
    auto_created: bool
    distance_from_start: float  # meters along the chain geometry

    @property
    def coord(self) -> Coord:
        return (self.lon, self.lat)


def _lerp(a: Coord, b: Coord, f: float) -> Coord:
    return (a[0] + f * (b[0] - a[0]), a[1] + f * (b[1] - a[1]))


def chain_stops(chain: SegmentChain, auto_stops: bool = False) -> list[StopDescriptor]:
    """
    Flatten a chain into its ordered stop sequence.

    With ``auto_stops`` placeholder stops are generated every ``segment.spacing``
    meters of path since the previous stop (spacing <= 0 disables them).
    """
    stops: list[StopDescriptor] = []
    if not len(chain):
        return stops

    d = 0.0
    next_auto = chain[0].spacing
    for i, seg in enumerate(chain):
        if i == 0 and seg.stop_at_start:
            lon, lat = seg.first
            stops.append(StopDescriptor(0, lon, lat, seg.from_stop_id, False, 0.0))

        # a lone point carries the same stop at both ends
        if seg.is_point:
            continue

        coords = seg.geometry.coordinates
        for a, b in zip(coords, coords[1:]):
            L = haversine_m(a, b)
            while auto_stops and seg.spacing > 0 and next_auto < d + L:
                lon, lat = _lerp(a, b, (next_auto - d) / L)
                stops.append(StopDescriptor(i, lon, lat, None, True, next_auto))
                next_auto += seg.spacing
            d += L

        if seg.stop_at_end:
            lon, lat = seg.last
            stops.append(StopDescriptor(i + 1, lon, lat, seg.to_stop_id, False, d))
            next_auto = d + (chain[i + 1].spacing if i + 1 < len(chain) else seg.spacing)
    return stops
