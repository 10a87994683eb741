from dataclasses import dataclass, field, replace

from reroute_editor.domain.entities.segments import SegmentChain


@dataclass(frozen=True)
class Modification:
    """A reroute between two points of an existing route; replaced, never mutated."""

    feed: str
    segments: SegmentChain = field(default_factory=SegmentChain)
    name: str = ""
    from_stop: str | None = None  # unscoped stop id within `feed`
    to_stop: str | None = None
    routes: tuple[str, ...] = ()
    trips: tuple[str, ...] | None = None  # None => every trip on `routes`
    speed: float = 15.0  # km/h
    dwell: float = 0.0  # seconds

    def with_segments(self, segments: SegmentChain) -> "Modification":
        return replace(self, segments=segments)
