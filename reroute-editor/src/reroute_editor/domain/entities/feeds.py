# domain/entities/feeds.py
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Stop:
    stop_id: str
    stop_lat: float
    stop_lon: float


@dataclass(frozen=True)
class Trip:
    trip_id: str
    start_time: int = 0  # seconds after midnight
    duration: int = 0  # seconds
    headsign: str | None = None
    short_name: str | None = None


@dataclass(frozen=True)
class Pattern:
    pattern_id: str
    name: str = ""
    trips: tuple[Trip, ...] = ()


@dataclass(frozen=True)
class Route:
    route_id: str
    patterns: tuple[Pattern, ...] = ()


@dataclass
class Feed:
    """Read-only view of one loaded GTFS feed."""

    feed_id: str
    stops: list[Stop] = field(default_factory=list)
    routes: dict[str, Route] = field(default_factory=dict)

    def scoped(self, entity_id: str) -> str:
        return feed_scoped(self.feed_id, entity_id)


def feed_scoped(feed_id: str, entity_id: str) -> str:
    return f"{feed_id}:{entity_id}"


def feed_scope_ids(feed_id: str, ids) -> list[str]:
    return [feed_scoped(feed_id, i) for i in ids]
