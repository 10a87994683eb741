# app/controllers/editor.py
import asyncio
import logging

from reroute_editor.app.protocols import PathProvider
from reroute_editor.domain.entities.geography import COORD_EPSILON, Coord, Point, to_coord
from reroute_editor.domain.entities.segments import DEFAULT_SPACING_M, Segment, SegmentChain
from reroute_editor.domain.mechanics.mechanics_snapping import DEFAULT_RADIUS_PIXELS, SnapIndex
from reroute_editor.domain.validation import require_valid

log = logging.getLogger(__name__)

START = -1  # insert position before the first boundary


class SegmentEditor:
    """
    Chain transforms for the reroute editor.

    Every operation takes the current chain and returns a new, validated one;
    the input chain is never modified. Positions are boundary indices
    (0..len); ``insert`` also accepts ``START`` and ``len(chain)`` for the ends.
    """

    def __init__(
        self,
        path_provider: PathProvider,
        snap_index: SnapIndex | None = None,
        *,
        follow_road: bool = False,
        default_spacing_m: float = DEFAULT_SPACING_M,
        snap_radius_pixels: float = DEFAULT_RADIUS_PIXELS,
        epsilon: float = COORD_EPSILON,
    ):
        self.paths = path_provider
        self.snap_index = snap_index if snap_index is not None else SnapIndex()
        self.follow_road = follow_road
        self.default_spacing_m = default_spacing_m
        self.snap_radius_pixels = snap_radius_pixels
        self.epsilon = epsilon

    # ---------------- helpers ----------------

    def _spacing(self, chain: SegmentChain, spacing: float | None) -> float:
        if spacing:
            return spacing
        return chain[0].spacing if len(chain) else self.default_spacing_m

    async def _segment(
        self,
        chain: SegmentChain,
        a: Coord | None,
        b: Coord | None,
        *,
        stop_at_start: bool,
        stop_at_end: bool,
        from_stop_id: str | None = None,
        to_stop_id: str | None = None,
        spacing: float | None = None,
    ) -> Segment:
        geometry = await self.paths.get_path(a, b, self.follow_road)
        return Segment(
            geometry=geometry,
            stop_at_start=stop_at_start,
            stop_at_end=stop_at_end,
            from_stop_id=from_stop_id,
            to_stop_id=to_stop_id,
            spacing=self._spacing(chain, spacing),
        )

    def _valid(self, chain: SegmentChain, op: str) -> SegmentChain:
        return require_valid(chain, op, self.epsilon)

    @staticmethod
    def _is_lone_point(chain: SegmentChain) -> bool:
        return len(chain) == 1 and chain[0].is_point

    def snap(self, coord: Coord, zoom: float | None) -> tuple[Coord, str | None]:
        """Return the nearest stop's location and id, or the coordinate unchanged."""
        coord = to_coord(coord)
        if zoom is None:
            return coord, None
        hit = self.snap_index.nearest(coord, zoom, self.snap_radius_pixels)
        if hit is None:
            return coord, None
        return hit.coord, hit.id

    # ---------------- operations ----------------

    async def insert(
        self,
        chain: SegmentChain,
        position: int,
        coord: Coord,
        stop_id: str | None = None,
        is_stop: bool = True,
        spacing: float | None = None,
    ) -> SegmentChain:
        n = len(chain)
        if position < START or position > n:
            raise IndexError(f"insert position {position} out of range for chain of {n}")
        coord = to_coord(coord)

        if 0 <= position < n and not chain[position].is_point:
            # replace one segment with two in the middle
            src = chain[position]
            seg0, seg1 = await asyncio.gather(
                self._segment(
                    chain,
                    src.first,
                    coord,
                    stop_at_start=src.stop_at_start,
                    from_stop_id=src.from_stop_id,
                    stop_at_end=is_stop,
                    to_stop_id=stop_id,
                    spacing=src.spacing,
                ),
                self._segment(
                    chain,
                    coord,
                    src.last,
                    stop_at_start=is_stop,
                    from_stop_id=stop_id,
                    stop_at_end=src.stop_at_end,
                    to_stop_id=src.to_stop_id,
                    spacing=src.spacing,
                ),
            )
            log.debug("split segment %d at %s", position, coord)
            return self._valid(chain.replace(position, position + 1, (seg0, seg1)), "insert")

        if position == START:
            if n:
                head = chain[0]
                # a lone point carries identical start/end metadata
                to, stop_at_end, to_stop_id = head.first, head.stop_at_start, head.from_stop_id
            else:
                # no stops yet; duplicate so the next insert picks it up
                to, stop_at_end, to_stop_id = None, is_stop, stop_id
            seg = await self._segment(
                chain,
                coord,
                to,
                stop_at_start=is_stop,
                from_stop_id=stop_id,
                stop_at_end=stop_at_end,
                to_stop_id=to_stop_id,
                spacing=spacing,
            )
            new = chain.replace(0, 0, (seg,))
            if len(new) == 2 and new[1].is_point:
                new = new.replace(1, 2, ())
            return self._valid(new, "insert")

        # at the end (or onto a lone point)
        if n:
            tail = chain[-1]
            if tail.is_point:
                frm, stop_at_start, from_stop_id = tail.first, tail.stop_at_start, tail.from_stop_id
            else:
                frm, stop_at_start, from_stop_id = tail.last, tail.stop_at_end, tail.to_stop_id
        else:
            frm, stop_at_start, from_stop_id = None, is_stop, stop_id
        seg = await self._segment(
            chain,
            frm,
            coord,
            stop_at_start=stop_at_start,
            from_stop_id=from_stop_id,
            stop_at_end=is_stop,
            to_stop_id=stop_id,
            spacing=spacing,
        )
        new = chain.replace(n, n, (seg,))
        if len(new) == 2 and new[0].is_point:
            new = new.replace(0, 1, ())
        return self._valid(new, "insert")

    async def delete(self, chain: SegmentChain, position: int) -> SegmentChain:
        n = len(chain)
        if not n or not 0 <= position <= n:
            raise IndexError(f"delete position {position} out of range for chain of {n}")

        if position == 0:
            return self._valid(chain.replace(0, 1, ()), "delete")
        if position == n:  # stop index, not hop index
            return self._valid(chain.replace(n - 1, n, ()), "delete")

        s0, s1 = chain[position - 1], chain[position]
        merged = await self._segment(
            chain,
            s0.first,
            s1.last,
            stop_at_start=s0.stop_at_start,
            from_stop_id=s0.from_stop_id,
            stop_at_end=s1.stop_at_end,
            to_stop_id=s1.to_stop_id,
            spacing=s0.spacing,
        )
        return self._valid(chain.replace(position - 1, position + 1, (merged,)), "delete")

    async def move(
        self,
        chain: SegmentChain,
        position: int,
        coord: Coord,
        zoom: float | None = None,
        auto_created: bool = False,
    ) -> SegmentChain:
        """
        Relocate a point.

        For an auto-created placeholder ``position`` is the segment it lies on;
        dragging it pins a real stop there (snapped when a stop is near).
        Otherwise ``position`` is a boundary; only stops snap, control points
        stay free, and the stop/control-point status never changes.
        """
        if auto_created:
            coord, stop_id = self.snap(coord, zoom)
            return await self.insert(chain, position, coord, stop_id, is_stop=True)

        n = len(chain)
        if not n or not 0 <= position <= n:
            raise IndexError(f"move position {position} out of range for chain of {n}")

        stop_id = None
        coord = to_coord(coord)
        if chain.is_stop(position):
            coord, stop_id = self.snap(coord, zoom)

        if self._is_lone_point(chain):
            seg = chain[0].with_(geometry=Point(coord), from_stop_id=stop_id, to_stop_id=stop_id)
            return self._valid(SegmentChain((seg,)), "move")

        lookups = []
        if position > 0:
            lookups.append(self.paths.get_path(chain[position - 1].first, coord, self.follow_road))
        if position < n:
            lookups.append(self.paths.get_path(coord, chain[position].last, self.follow_road))
        geoms = list(await asyncio.gather(*lookups))

        new_segs = []
        if position > 0:
            new_segs.append(chain[position - 1].with_(geometry=geoms.pop(0), to_stop_id=stop_id))
        if position < n:
            new_segs.append(chain[position].with_(geometry=geoms.pop(0), from_stop_id=stop_id))
        new = chain.replace(max(position - 1, 0), min(position + 1, n), new_segs)
        return self._valid(new, "move")

    def toggle(self, chain: SegmentChain, position: int) -> SegmentChain:
        n = len(chain)
        if not n or not 0 <= position <= n:
            raise IndexError(f"toggle position {position} out of range for chain of {n}")
        currently = chain.is_stop(position)

        if self._is_lone_point(chain):
            seg = chain[0]
            sid = None if currently else seg.from_stop_id
            seg = seg.with_(
                stop_at_start=not currently,
                stop_at_end=not currently,
                from_stop_id=sid,
                to_stop_id=sid,
            )
            return self._valid(SegmentChain((seg,)), "toggle")

        new_segs = []
        if position > 0:
            prev = chain[position - 1]
            # a control point can't be snapped to a stop
            new_segs.append(
                prev.with_(stop_at_end=not currently, to_stop_id=None if currently else prev.to_stop_id)
            )
        if position < n:
            nxt = chain[position]
            new_segs.append(
                nxt.with_(stop_at_start=not currently, from_stop_id=None if currently else nxt.from_stop_id)
            )
        new = chain.replace(max(position - 1, 0), min(position + 1, n), new_segs)
        return self._valid(new, f"toggling stop {'off' if currently else 'on'}")
