import logging

from reroute_editor.app.errors import PathProviderFailure
from reroute_editor.app.protocols import PathProvider, RoutingBackend
from reroute_editor.domain.entities.geography import (
    COORD_EPSILON,
    Coord,
    Geometry,
    LineString,
    Point,
    coords_equal,
    to_coord,
)

log = logging.getLogger(__name__)


def reconcile_endpoints(
    coords, a: Coord, b: Coord, epsilon: float = COORD_EPSILON
) -> tuple[Coord, ...]:
    """Pin a routed polyline to the exact requested endpoints."""
    out = [to_coord(c) for c in coords]
    if not out or not coords_equal(out[0], a, epsilon):
        out.insert(0, a)
    if len(out) == 1 or not coords_equal(out[-1], b, epsilon):
        out.append(b)
    return tuple(out)


class RoutedPathProvider(PathProvider):
    def __init__(self, backend: RoutingBackend, epsilon: float = COORD_EPSILON):
        self.backend, self.epsilon = backend, epsilon

    async def get_path(self, a: Coord | None, b: Coord | None, follow_road: bool) -> Geometry:
        if a is None or b is None:
            # start of a chain: only one endpoint exists yet
            c = a if a is not None else b
            if c is None:
                raise ValueError("get_path needs at least one endpoint")
            return Point(to_coord(c))
        a, b = to_coord(a), to_coord(b)
        if not follow_road:
            return LineString((a, b))
        try:
            coords = await self.backend.route(a, b)
        except PathProviderFailure:
            raise
        except Exception as exc:
            log.warning("routing %s -> %s failed: %s", a, b, exc)
            raise PathProviderFailure(f"routing {a} -> {b} failed: {exc}") from exc
        return LineString(reconcile_endpoints(coords, a, b, self.epsilon))
