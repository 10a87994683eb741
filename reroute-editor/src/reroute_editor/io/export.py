# io/export.py
from dataclasses import dataclass

from reroute_editor.app.errors import ExportMismatch
from reroute_editor.app.hooks import NoopHooks
from reroute_editor.app.protocols import EditHooks
from reroute_editor.domain.entities.feeds import feed_scope_ids, feed_scoped
from reroute_editor.domain.entities.modification import Modification
from reroute_editor.domain.mechanics.mechanics_path_traversers import dwell_times, hop_times
from reroute_editor.domain.mechanics.mechanics_stops import StopDescriptor, chain_stops
from reroute_editor.io.recorder import Recorder


@dataclass(frozen=True)
class RerouteRecord:
    from_stop: str | None
    to_stop: str | None
    stops: tuple[dict, ...]
    hop_times: tuple[float, ...]
    dwell_times: tuple[float, ...]
    patterns: tuple[str, ...] | None = None
    routes: tuple[str, ...] | None = None
    type: str = "reroute"

    def to_wire(self) -> dict:
        out: dict = {"type": self.type, "fromStop": self.from_stop, "toStop": self.to_stop}
        if self.patterns is not None:
            out["patterns"] = list(self.patterns)
        else:
            out["routes"] = list(self.routes or ())
        out["stops"] = [dict(s) for s in self.stops]
        out["hopTimes"] = list(self.hop_times)
        out["dwellTimes"] = list(self.dwell_times)
        return out


def _descriptor(stop: StopDescriptor) -> dict:
    # already feed scoped; anything else gets created downstream
    if stop.stop_id is not None:
        return {"id": stop.stop_id}
    return {"lat": stop.lat, "lon": stop.lon}


def convert_reroute(mod: Modification, *, auto_stops: bool = False) -> RerouteRecord:
    from_stop = feed_scoped(mod.feed, mod.from_stop) if mod.from_stop is not None else None
    to_stop = feed_scoped(mod.feed, mod.to_stop) if mod.to_stop is not None else None

    patterns = routes = None
    if mod.trips is not None:
        patterns = tuple(feed_scope_ids(mod.feed, mod.trips))
    else:
        routes = tuple(feed_scope_ids(mod.feed, mod.routes))

    stops = chain_stops(mod.segments, auto_stops=auto_stops)
    out = [_descriptor(s) for s in stops]

    # from and to stops are implied by the route, not repeated in the reroute
    if from_stop is not None:
        first = out.pop(0) if out else {}
        if first.get("id") != from_stop:
            raise ExportMismatch("first", from_stop, first.get("id"))
    if to_stop is not None:
        last = out.pop() if out else {}
        if last.get("id") != to_stop:
            raise ExportMismatch("last", to_stop, last.get("id"))

    hops = hop_times(stops, mod.speed)
    return RerouteRecord(
        from_stop=from_stop,
        to_stop=to_stop,
        patterns=patterns,
        routes=routes,
        stops=tuple(out),
        hop_times=tuple(hops),
        dwell_times=tuple(dwell_times(hops, mod.dwell)),
    )


class Exporter:
    def __init__(
        self,
        *,
        auto_stops: bool = False,
        hooks: EditHooks | None = None,
        recorder: Recorder | None = None,
    ):
        self.auto_stops = auto_stops
        self.hooks = hooks or NoopHooks()
        self.recorder = recorder

    def export(self, mod: Modification) -> RerouteRecord:
        record = convert_reroute(mod, auto_stops=self.auto_stops)
        self.hooks.export(record, name=mod.name)
        if self.recorder:
            self.recorder.emit(record)
        return record
