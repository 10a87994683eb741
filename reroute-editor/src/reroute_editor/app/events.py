# app/events.py
from dataclasses import dataclass

from reroute_editor.domain.entities.geography import Coord


@dataclass(frozen=True)
class EditRequest:
    """Base type for edits submitted to an EditSession."""


# Chain operations
@dataclass(frozen=True)
class InsertPoint(EditRequest):
    position: int  # START, interior segment index, or len(chain)
    coord: Coord
    stop_id: str | None = None
    is_stop: bool = True
    spacing: float | None = None


@dataclass(frozen=True)
class DeletePoint(EditRequest):
    position: int


@dataclass(frozen=True)
class MovePoint(EditRequest):
    position: int
    coord: Coord
    zoom: float | None = None
    auto_created: bool = False


@dataclass(frozen=True)
class ToggleStop(EditRequest):
    position: int


# Map gestures
@dataclass(frozen=True)
class ExtendChain(EditRequest):
    """Click on the map: snap, then add a stop at one end of the chain."""

    coord: Coord
    zoom: float | None = None
    from_end: bool = True


@dataclass(frozen=True)
class DragSegment(EditRequest):
    """Drag the middle of a segment: insert a free control point there."""

    segment: int
    coord: Coord
