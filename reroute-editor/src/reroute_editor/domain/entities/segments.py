from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

from reroute_editor.domain.entities.geography import Coord, Geometry, geometry_from_geojson

DEFAULT_SPACING_M = 400.0


@dataclass(frozen=True)
class Segment:
    geometry: Geometry
    stop_at_start: bool
    stop_at_end: bool
    from_stop_id: str | None = None  # feed-scoped, None => unsnapped or control point
    to_stop_id: str | None = None
    spacing: float = DEFAULT_SPACING_M  # meters between auto-created stops

    @property
    def is_point(self) -> bool:
        return self.geometry.type == "Point"

    @property
    def first(self) -> Coord:
        return self.geometry.first

    @property
    def last(self) -> Coord:
        return self.geometry.last

    def with_(self, **changes) -> Segment:
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "geometry": self.geometry.to_geojson(),
            "stopAtStart": self.stop_at_start,
            "stopAtEnd": self.stop_at_end,
            "fromStopId": self.from_stop_id,
            "toStopId": self.to_stop_id,
            "spacing": self.spacing,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Segment:
        return cls(
            geometry=geometry_from_geojson(d["geometry"]),
            stop_at_start=bool(d["stopAtStart"]),
            stop_at_end=bool(d["stopAtEnd"]),
            from_stop_id=d.get("fromStopId"),
            to_stop_id=d.get("toStopId"),
            spacing=float(d.get("spacing") or DEFAULT_SPACING_M),
        )


@dataclass(frozen=True)
class SegmentChain:
    """
    Ordered, immutable run of segments forming one edited path.

    Boundary ``i`` (0..len) is the start of segment ``i`` or the end of
    segment ``i - 1``; editing operations address points by boundary index.
    """

    segments: tuple[Segment, ...] = ()

    @classmethod
    def of(cls, segments: Iterable[Segment]) -> SegmentChain:
        return cls(tuple(segments))

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __getitem__(self, i: int) -> Segment:
        return self.segments[i]

    @property
    def first(self) -> Segment | None:
        return self.segments[0] if self.segments else None

    @property
    def last(self) -> Segment | None:
        return self.segments[-1] if self.segments else None

    # ---------------- boundary accessors ----------------

    def _check_boundary(self, i: int) -> None:
        if not self.segments or not 0 <= i <= len(self.segments):
            raise IndexError(f"boundary {i} out of range for chain of {len(self.segments)}")

    def is_stop(self, i: int) -> bool:
        self._check_boundary(i)
        return self.segments[0].stop_at_start if i == 0 else self.segments[i - 1].stop_at_end

    def stop_id(self, i: int) -> str | None:
        self._check_boundary(i)
        return self.segments[0].from_stop_id if i == 0 else self.segments[i - 1].to_stop_id

    def coordinate(self, i: int) -> Coord:
        self._check_boundary(i)
        return self.segments[0].first if i == 0 else self.segments[i - 1].last

    # ---------------- copy-on-write ----------------

    def replace(self, start: int, stop: int, new: Iterable[Segment]) -> SegmentChain:
        return SegmentChain(self.segments[:start] + tuple(new) + self.segments[stop:])

    def to_list(self) -> list[dict]:
        return [s.to_dict() for s in self.segments]

    @classmethod
    def from_list(cls, items: Iterable[dict]) -> SegmentChain:
        return cls(tuple(Segment.from_dict(d) for d in items))
