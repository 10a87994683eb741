import pytest

from reroute_editor.domain.entities.geography import LineString, Point
from reroute_editor.domain.entities.segments import Segment, SegmentChain
from reroute_editor.domain.mechanics.mechanics_path_traversers import dwell_times, hop_times
from reroute_editor.domain.mechanics.mechanics_stops import chain_stops

DEG_PER_M = 1 / 111_195.08  # along the equator


def _east(m: float) -> tuple[float, float]:
    return (m * DEG_PER_M, 0.0)


def _chain() -> SegmentChain:
    # stop(0) --1000m-- control point --500m-- stop(1500)
    s0 = Segment(LineString((_east(0), _east(1000))), True, False, "f:a", None, spacing=400.0)
    s1 = Segment(LineString((_east(1000), _east(1500))), False, True, None, None, spacing=400.0)
    return SegmentChain((s0, s1))


def test_explicit_stops_skip_control_points():
    stops = chain_stops(_chain())
    assert [(s.index, s.stop_id, s.auto_created) for s in stops] == [
        (0, "f:a", False),
        (2, None, False),
    ]
    assert stops[1].distance_from_start == pytest.approx(1500.0, rel=1e-6)
    assert stops[1].coord == _east(1500)


def test_auto_stops_every_spacing_meters():
    stops = chain_stops(_chain(), auto_stops=True)
    auto = [s for s in stops if s.auto_created]
    assert [round(s.distance_from_start) for s in auto] == [400, 800, 1200]
    # auto stops carry the index of the segment they lie on
    assert [s.index for s in auto] == [0, 0, 1]
    assert auto[0].lon == pytest.approx(_east(400)[0], rel=1e-9)
    assert [s.auto_created for s in stops] == [False, True, True, True, False]


def test_lone_point_is_one_stop():
    chain = SegmentChain((Segment(Point(_east(0)), True, True, "f:a", "f:a"),))
    stops = chain_stops(chain)
    assert len(stops) == 1 and stops[0].stop_id == "f:a"
    assert hop_times(stops, 20.0) == []
    assert dwell_times([], 30.0) == [30.0]


def test_hop_times_at_constant_speed():
    stops = chain_stops(_chain(), auto_stops=True)
    hops = hop_times(stops, 36.0)  # 10 m/s
    assert hops == pytest.approx([40.0, 40.0, 40.0, 30.0], rel=1e-6)
    assert len(dwell_times(hops, 15.0)) == len(hops) + 1


def test_hop_times_reject_non_positive_speed():
    with pytest.raises(ValueError):
        hop_times(chain_stops(_chain()), 0.0)
