# domain/selection.py
from collections.abc import Iterable

from reroute_editor.domain.entities.feeds import Feed, Pattern, Trip


def route_patterns(feed: Feed, route_id: str) -> tuple[Pattern, ...]:
    try:
        return feed.routes[route_id].patterns
    except KeyError:
        raise KeyError(f"route {route_id!r} not in feed {feed.feed_id!r}") from None


def trips_for_patterns(feed: Feed, route_id: str, pattern_ids: Iterable[str]) -> list[str]:
    """Convert selected patterns to trip ids; pattern ids are not stable across loads."""
    by_id = {p.pattern_id: p for p in route_patterns(feed, route_id)}
    out: list[str] = []
    for pid in pattern_ids:
        out.extend(t.trip_id for t in by_id[pid].trips)
    return out


def patterns_for_trips(feed: Feed, route_id: str, trips: Iterable[str] | None) -> list[Pattern]:
    """Patterns with at least one selected trip; ``trips=None`` selects every pattern."""
    patterns = route_patterns(feed, route_id)
    if trips is None:
        return list(patterns)
    wanted = set(trips)
    return [p for p in patterns if any(t.trip_id in wanted for t in p.trips)]


def trips_on_patterns(feed: Feed, route_id: str, trip_ids: Iterable[str]) -> list[Trip]:
    wanted = set(trip_ids)
    trips = [t for p in route_patterns(feed, route_id) for t in p.trips if t.trip_id in wanted]
    return sorted(trips, key=lambda t: t.start_time)


def trip_label(t: Trip) -> str:
    prefix = f"{t.short_name} " if t.short_name else (f"{t.headsign} " if t.headsign else "")
    hh, mm = divmod(t.start_time // 60, 60)
    return f"{prefix}starting {hh:02d}:{mm:02d} ({round(t.duration / 60)} minute trip)"
