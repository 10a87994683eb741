import pytest

from reroute_editor.domain.entities.feeds import Feed, Pattern, Route, Trip
from reroute_editor.domain.selection import (
    patterns_for_trips,
    trip_label,
    trips_for_patterns,
    trips_on_patterns,
)


@pytest.fixture
def feed() -> Feed:
    p1 = Pattern("p1", "Outbound", (Trip("t1", start_time=8 * 3600), Trip("t2", start_time=7 * 3600)))
    p2 = Pattern("p2", "Inbound", (Trip("t3", start_time=9 * 3600),))
    return Feed("A", routes={"r1": Route("r1", (p1, p2))})


def test_trips_for_patterns_expands_selection(feed):
    assert trips_for_patterns(feed, "r1", ["p2", "p1"]) == ["t3", "t1", "t2"]


def test_patterns_for_trips(feed):
    assert [p.pattern_id for p in patterns_for_trips(feed, "r1", ["t2"])] == ["p1"]
    # None is a wildcard for every trip on the route
    assert [p.pattern_id for p in patterns_for_trips(feed, "r1", None)] == ["p1", "p2"]
    assert patterns_for_trips(feed, "r1", []) == []


def test_trips_on_patterns_sorted_by_start(feed):
    assert [t.trip_id for t in trips_on_patterns(feed, "r1", ["t1", "t3", "t2"])] == ["t2", "t1", "t3"]


def test_unknown_route(feed):
    with pytest.raises(KeyError, match="r9"):
        trips_for_patterns(feed, "r9", ["p1"])


def test_trip_label():
    t = Trip("t1", start_time=7 * 3600 + 5 * 60, duration=1800, headsign="Downtown")
    assert trip_label(t) == "Downtown starting 07:05 (30 minute trip)"
