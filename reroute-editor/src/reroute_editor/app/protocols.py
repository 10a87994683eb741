from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from reroute_editor.domain.entities.geography import Coord, Geometry


# ------------- Mechanics --------------------
@runtime_checkable
class RoutingBackend(Protocol):
    """
    External road-following capability.
    Returns the path between two (lon, lat) points as a coordinate list; its
    endpoints need not match the request exactly.
    """

    async def route(self, a: Coord, b: Coord) -> Sequence[Sequence[float]]: ...


@runtime_checkable
class PathProvider(Protocol):
    """
    Responsibilities:
      • Produce segment geometry between two endpoints (either may be absent).
      • Guarantee the returned geometry starts/ends exactly at the request.
    """

    async def get_path(self, a: Coord | None, b: Coord | None, follow_road: bool) -> Geometry: ...


@runtime_checkable
class RecordSink(Protocol):
    def write(self, record) -> None: ...


@runtime_checkable
class EditHooks(Protocol):
    def edit_start(self, edit, *, generation: int): ...
    def edit_applied(self, edit, *, generation: int, segments: int): ...
    def edit_discarded(self, edit, *, base_generation: int, generation: int): ...
    def edit_failed(self, edit, *, exc: BaseException): ...
    def snap_index_rebuilt(self, *, candidates: int, feeds: Iterable[str]): ...
    def export(self, record, *, name: str): ...
