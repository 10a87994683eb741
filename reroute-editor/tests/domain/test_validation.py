import pytest

from reroute_editor.app.errors import InvariantViolation
from reroute_editor.domain.entities.geography import LineString, Point
from reroute_editor.domain.entities.segments import Segment, SegmentChain
from reroute_editor.domain.validation import find_violation, require_valid, validate

A, B, C = (0.0, 0.0), (0.01, 0.0), (0.02, 0.01)


def _abc_chain(**s1_changes) -> SegmentChain:
    s0 = Segment(LineString((A, B)), True, True, "f:a", "f:b")
    s1 = Segment(LineString((B, C)), True, True, "f:b", "f:c").with_(**s1_changes)
    return SegmentChain((s0, s1))


def test_two_lines_with_matching_boundary_are_valid():
    assert validate(_abc_chain())


def test_empty_and_lone_point_chains_are_valid():
    assert validate(SegmentChain())
    assert validate(SegmentChain((Segment(Point(A), True, True, "f:a", "f:a"),)))


def test_mismatched_stop_ids_are_invalid():
    chain = _abc_chain()
    s0 = chain[0].with_(to_stop_id="x")
    s1 = chain[1].with_(from_stop_id="y")
    assert not validate(SegmentChain((s0, s1)))


def test_mismatched_stop_flags_are_invalid():
    assert not validate(_abc_chain(stop_at_start=False))


def test_non_contiguous_coordinates_are_invalid():
    moved = (B[0] + 1e-4, B[1])
    assert not validate(_abc_chain(geometry=LineString((moved, C))))


def test_coordinates_within_tolerance_are_contiguous():
    nudged = (B[0] + 5e-7, B[1] - 5e-7)
    assert validate(_abc_chain(geometry=LineString((nudged, C))))


def test_point_geometry_in_longer_chain_is_invalid():
    chain = _abc_chain(geometry=Point(B))
    reason = find_violation(chain)
    assert reason is not None and "LineString" in reason
    assert not validate(chain)


def test_require_valid_raises_invariant_violation():
    chain = _abc_chain(from_stop_id="nope")
    with pytest.raises(InvariantViolation) as ei:
        require_valid(chain, "insert")
    assert ei.value.op == "insert"
    assert "stop id" in str(ei.value)
    assert require_valid(_abc_chain(), "insert") == _abc_chain()


def test_chain_round_trips_through_store_dicts():
    chain = _abc_chain()
    data = chain.to_list()
    assert data[0]["geometry"] == {"type": "LineString", "coordinates": [[0.0, 0.0], [0.01, 0.0]]}
    assert data[1]["fromStopId"] == "f:b"
    assert SegmentChain.from_list(data) == chain


def test_boundary_accessors():
    chain = _abc_chain()
    assert chain.coordinate(0) == A and chain.coordinate(1) == B and chain.coordinate(2) == C
    assert chain.stop_id(1) == "f:b"
    assert chain.is_stop(2)
    with pytest.raises(IndexError):
        chain.is_stop(3)
