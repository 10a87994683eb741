# app/controllers/session.py
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Literal

from reroute_editor.app.controllers.editor import START, SegmentEditor
from reroute_editor.app.events import (
    DeletePoint,
    DragSegment,
    EditRequest,
    ExtendChain,
    InsertPoint,
    MovePoint,
    ToggleStop,
)
from reroute_editor.app.hooks import NoopHooks
from reroute_editor.app.protocols import EditHooks
from reroute_editor.domain.entities.feeds import Feed
from reroute_editor.domain.entities.modification import Modification
from reroute_editor.domain.entities.segments import SegmentChain
from reroute_editor.domain.mechanics.mechanics_snapping import SnapIndex
from reroute_editor.domain.selection import trips_for_patterns


@dataclass(frozen=True)
class EditOutcome:
    status: Literal["applied", "stale", "ignored"]
    generation: int
    modification: Modification


class EditSession:
    """
    Owns the Modification being edited.

    Each edit composes against the chain of the generation current when it
    started; the result is adopted only if no other change landed meanwhile,
    otherwise it is dropped (status "stale"). Adoption is a single swap.
    """

    def __init__(
        self,
        modification: Modification,
        editor: SegmentEditor,
        hooks: EditHooks | None = None,
        *,
        allow_extend: bool = True,
        feeds: Iterable[Feed] = (),
    ):
        self._mod = modification
        self._gen = 0
        self.editor = editor
        self.hooks = hooks or NoopHooks()
        self.allow_extend = allow_extend
        self.feeds: dict[str, Feed] = {f.feed_id: f for f in feeds}

    @property
    def modification(self) -> Modification:
        return self._mod

    @property
    def chain(self) -> SegmentChain:
        return self._mod.segments

    @property
    def generation(self) -> int:
        return self._gen

    def replace_modification(self, modification: Modification) -> None:
        """Swap the non-chain fields; the chain only changes through ``apply``."""
        self._mod = modification.with_segments(self._mod.segments)
        self._gen += 1

    def select_patterns(self, route_id: str, pattern_ids: Iterable[str] | None) -> None:
        """Restrict the reroute to the trips of the chosen patterns (None => every trip)."""
        trips = None
        if pattern_ids is not None:
            feed = self.feeds[self._mod.feed]
            trips = tuple(trips_for_patterns(feed, route_id, pattern_ids))
        self.replace_modification(replace(self._mod, routes=(route_id,), trips=trips))

    def rebuild_snap_index(self, feeds: Iterable[Feed]) -> SnapIndex:
        feeds = list(feeds)
        self.feeds = {f.feed_id: f for f in feeds}
        index = SnapIndex.from_feeds(feeds, min_zoom=self.editor.snap_index.min_zoom)
        self.editor.snap_index = index
        self.hooks.snap_index_rebuilt(candidates=len(index), feeds=[f.feed_id for f in feeds])
        return index

    async def apply(self, edit: EditRequest) -> EditOutcome:
        if isinstance(edit, ExtendChain) and not self.allow_extend:
            return EditOutcome("ignored", self._gen, self._mod)

        base_gen, base = self._gen, self._mod
        self.hooks.edit_start(edit, generation=base_gen)
        try:
            chain = await self._compose(base.segments, edit)
        except Exception as exc:
            self.hooks.edit_failed(edit, exc=exc)
            raise

        if self._gen != base_gen:
            self.hooks.edit_discarded(edit, base_generation=base_gen, generation=self._gen)
            return EditOutcome("stale", self._gen, self._mod)

        self._mod = base.with_segments(chain)
        self._gen += 1
        self.hooks.edit_applied(edit, generation=self._gen, segments=len(chain))
        return EditOutcome("applied", self._gen, self._mod)

    async def _compose(self, chain: SegmentChain, edit: EditRequest) -> SegmentChain:
        ed = self.editor
        if isinstance(edit, InsertPoint):
            return await ed.insert(
                chain, edit.position, edit.coord, edit.stop_id, edit.is_stop, edit.spacing
            )
        if isinstance(edit, DeletePoint):
            return await ed.delete(chain, edit.position)
        if isinstance(edit, MovePoint):
            return await ed.move(chain, edit.position, edit.coord, edit.zoom, edit.auto_created)
        if isinstance(edit, ToggleStop):
            return ed.toggle(chain, edit.position)
        if isinstance(edit, ExtendChain):
            coord, stop_id = ed.snap(edit.coord, edit.zoom)
            position = len(chain) if edit.from_end else START
            return await ed.insert(chain, position, coord, stop_id, is_stop=True)
        if isinstance(edit, DragSegment):
            return await ed.insert(chain, edit.segment, edit.coord, None, is_stop=False)
        raise TypeError(edit)
