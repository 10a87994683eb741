import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
from pydantic import ValidationError

from reroute_editor.app.build import build
from reroute_editor.app.events import ExtendChain, ToggleStop
from reroute_editor.config.models import EditorAppModel, RouterOsrmModel
from reroute_editor.domain.entities.feeds import Feed, Pattern, Route, Stop, Trip
from reroute_editor.domain.entities.modification import Modification
from reroute_editor.domain.mechanics.mechanics_routers import OsrmRouter, StraightRouter
from reroute_editor.runtime.registries import make_router

FEEDS = [
    Feed(
        "A",
        stops=[Stop("1", 0.0, 0.0), Stop("2", 0.0, 0.01), Stop("3", 0.0, 0.02)],
    )
]


def test_build_edit_and_export(tmp_path):
    out = tmp_path / "reroutes.jsonl"
    cfg = {
        "name": "test",
        "snap": {"min_zoom": 12, "radius_pixels": 10},
        "editor": {"default_spacing_m": 5000},
        "router": {"kind": "straight"},
        "export": {"record": True, "record_path": str(out)},
    }
    mod = Modification(feed="A", from_stop="1", routes=("r1",), speed=30.0, dwell=10.0)
    app = build(cfg, mod, feeds=FEEDS, use_logging=False)
    assert isinstance(app.router, StraightRouter)

    async def draw():
        for lon in (0.0, 0.01, 0.02):
            await app.session.apply(ExtendChain((lon + 1e-5, 0.0), zoom=15))

    asyncio.run(draw())
    chain = app.session.chain
    assert len(chain) == 2
    assert [chain.stop_id(i) for i in range(3)] == ["A:1", "A:2", "A:3"]

    rec = app.exporter.export(app.session.modification)
    assert list(rec.stops) == [{"id": "A:2"}, {"id": "A:3"}]
    assert len(rec.hop_times) == 2 and rec.dwell_times == (10.0, 10.0, 10.0)
    assert json.loads(out.read_text())["fromStop"] == "A:1"

    # turning the middle stop into a control point removes it from the export
    asyncio.run(app.session.apply(ToggleStop(1)))
    rec = app.exporter.export(app.session.modification)
    assert list(rec.stops) == [{"id": "A:3"}] and len(rec.hop_times) == 1


def test_config_defaults_and_validation():
    model = EditorAppModel()
    assert model.snap.min_zoom == 12 and model.snap.radius_pixels == 10
    assert model.editor.default_spacing_m == 400.0
    assert model.router.kind == "straight"

    with pytest.raises(ValidationError):
        EditorAppModel.model_validate({"editor": {"default_spacing_m": 0}})
    with pytest.raises(ValidationError):
        EditorAppModel.model_validate({"router": {"kind": "valhalla"}})
    with pytest.raises(ValidationError):
        EditorAppModel.model_validate({"snap": {"unknown": 1}})


def test_make_router_osrm():
    cfg = RouterOsrmModel(base_url="http://osrm.local/", profile="bus")
    assert cfg.base_url == "http://osrm.local"
    router = make_router(cfg)
    assert isinstance(router, OsrmRouter) and router.profile == "bus"


class _OsrmHandler(BaseHTTPRequestHandler):
    """Keep-alive OSRM stand-in: routes via the midpoint nudged north."""

    protocol_version = "HTTP/1.1"

    def do_GET(self):
        pair = self.path.split("?")[0].rsplit("/", 1)[-1]
        (lon0, lat0), (lon1, lat1) = (map(float, p.split(",")) for p in pair.split(";"))
        mid = [(lon0 + lon1) / 2, (lat0 + lat1) / 2 + 0.001]
        body = json.dumps(
            {"code": "Ok", "routes": [{"geometry": {"coordinates": [[lon0, lat0], mid, [lon1, lat1]]}}]}
        ).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, *args):
        pass


@pytest.fixture
def osrm_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _OsrmHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def test_osrm_app_survives_one_event_loop_per_edit(osrm_url):
    cfg = {
        "router": {"kind": "osrm", "base_url": osrm_url},
        "editor": {"follow_road": True},
    }
    app = build(cfg, Modification(feed="A"), feeds=FEEDS, use_logging=False)
    assert isinstance(app.router, OsrmRouter)

    for lon in (0.0, 0.01, 0.02, 0.03):
        out = asyncio.run(app.session.apply(ExtendChain((lon, 0.0), zoom=15)))
        assert out.status == "applied"

    chain = app.session.chain
    assert len(chain) == 3
    assert all(len(seg.geometry.coordinates) == 3 for seg in chain)
    assert [chain.stop_id(i) for i in range(4)] == ["A:1", "A:2", "A:3", None]
    asyncio.run(app.aclose())


def test_aclose_without_closable_router():
    app = build({}, Modification(feed="A"), use_logging=False)
    asyncio.run(app.aclose())


def test_build_exposes_loaded_feeds_for_trip_selection():
    trips = (Trip("t1", start_time=3600), Trip("t2", start_time=7200))
    feed = Feed("A", stops=FEEDS[0].stops, routes={"r1": Route("r1", (Pattern("p1", trips=trips),))})
    app = build({}, Modification(feed="A", routes=("r1",)), feeds=[feed], use_logging=False)

    app.session.select_patterns("r1", ["p1"])
    assert app.session.modification.trips == ("t1", "t2")
    assert app.exporter.export(app.session.modification).patterns == ("A:t1", "A:t2")

    app.session.select_patterns("r1", None)
    assert app.session.modification.trips is None
