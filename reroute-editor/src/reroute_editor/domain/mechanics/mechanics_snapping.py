import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from reroute_editor.domain.entities.feeds import Feed
from reroute_editor.domain.entities.geography import EARTH_RADIUS_M, Coord

CIRCUMFERENCE_OF_EARTH_M = 40_000_000
MIN_STOP_SNAP_ZOOM = 12
DEFAULT_RADIUS_PIXELS = 10


@dataclass(frozen=True)
class SnapCandidate:
    id: str  # feed-scoped
    lat: float
    lon: float

    @property
    def coord(self) -> Coord:
        return (self.lon, self.lat)


def meters_per_pixel(zoom: float) -> float:
    return CIRCUMFERENCE_OF_EARTH_M / (256 * 2**zoom)


def snap_radius_m(zoom: float, radius_pixels: float = DEFAULT_RADIUS_PIXELS) -> float:
    return radius_pixels * meters_per_pixel(zoom)


def build_snap_candidates(feeds: Iterable[Feed]) -> tuple[SnapCandidate, ...]:
    # feed-scope stops so new points can snap to stops from any loaded feed
    return tuple(
        SnapCandidate(id=feed.scoped(s.stop_id), lat=float(s.stop_lat), lon=float(s.stop_lon))
        for feed in feeds
        for s in feed.stops
    )


def _haversine_many(lon: float, lat: float, lons: np.ndarray, lats: np.ndarray) -> np.ndarray:
    lon0, lat0 = math.radians(lon), math.radians(lat)
    lon1, lat1 = np.radians(lons), np.radians(lats)
    h = np.sin((lat1 - lat0) / 2) ** 2 + math.cos(lat0) * np.cos(lat1) * np.sin((lon1 - lon0) / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.minimum(1.0, np.sqrt(h)))


class SnapIndex:
    """
    Immutable proximity index over feed-scoped stops.
    Rebuild (don't mutate) whenever the loaded feed set changes.
    """

    def __init__(self, candidates: Sequence[SnapCandidate] = (), *, min_zoom: float = MIN_STOP_SNAP_ZOOM):
        self.candidates = tuple(candidates)
        self.min_zoom = min_zoom
        self._lats = np.fromiter((c.lat for c in self.candidates), dtype=float, count=len(self.candidates))
        self._lons = np.fromiter((c.lon for c in self.candidates), dtype=float, count=len(self.candidates))

    @classmethod
    def from_feeds(cls, feeds: Iterable[Feed], **kw) -> "SnapIndex":
        return cls(build_snap_candidates(feeds), **kw)

    def __len__(self) -> int:
        return len(self.candidates)

    def nearest(
        self,
        query: Coord,
        zoom: float,
        radius_pixels: float = DEFAULT_RADIUS_PIXELS,
        radius_meters: float | None = None,
    ) -> SnapCandidate | None:
        # don't snap at zoom levels where stops aren't shown
        if zoom < self.min_zoom or not self.candidates:
            return None
        if radius_meters is None:
            radius_meters = snap_radius_m(zoom, radius_pixels)

        lon, lat = query
        d_lat = 360 * radius_meters / CIRCUMFERENCE_OF_EARTH_M
        d_lng = abs(d_lat / math.cos(math.radians(lat)))
        in_box = (
            (self._lats > lat - d_lat)
            & (self._lats < lat + d_lat)
            & (self._lons > lon - d_lng)
            & (self._lons < lon + d_lng)
        )
        idx = np.flatnonzero(in_box)
        if idx.size == 0:
            return None

        dist = _haversine_many(lon, lat, self._lons[idx], self._lats[idx])
        best = int(np.argmin(dist))  # first minimum => stable by candidate order
        if dist[best] >= radius_meters:
            return None
        return self.candidates[int(idx[best])]


def find_nearest(
    query: Coord,
    zoom: float,
    candidates: Sequence[SnapCandidate],
    radius_pixels: float = DEFAULT_RADIUS_PIXELS,
    *,
    min_zoom: float = MIN_STOP_SNAP_ZOOM,
) -> SnapCandidate | None:
    return SnapIndex(candidates, min_zoom=min_zoom).nearest(query, zoom, radius_pixels)
