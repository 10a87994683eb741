# reroute_editor/app/build.py
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from reroute_editor.app.controllers.editor import SegmentEditor
from reroute_editor.app.controllers.session import EditSession
from reroute_editor.app.hooks import NoopHooks
from reroute_editor.app.protocols import PathProvider, RoutingBackend
from reroute_editor.config.models import EditorAppModel
from reroute_editor.domain.entities.feeds import Feed
from reroute_editor.domain.entities.modification import Modification
from reroute_editor.domain.mechanics.mechanics_path_providers import RoutedPathProvider
from reroute_editor.domain.mechanics.mechanics_snapping import SnapIndex
from reroute_editor.io.edit_logging import EditLogging  # JSON logs
from reroute_editor.io.export import Exporter
from reroute_editor.io.recorder import JsonlFileSink, JsonlSink, Recorder
from reroute_editor.runtime.registries import make_router


@dataclass
class App:
    config: EditorAppModel
    router: RoutingBackend
    paths: PathProvider
    snap_index: SnapIndex
    editor: SegmentEditor
    session: EditSession
    exporter: Exporter

    async def aclose(self) -> None:
        close = getattr(self.router, "close", None)
        if close is not None:
            await close()


def build(
    cfg: EditorAppModel | Mapping,
    modification: Modification,
    *,
    feeds: Iterable[Feed] = (),
    router: RoutingBackend | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, EditorAppModel) else EditorAppModel.model_validate(cfg)

    hooks = (
        EditLogging(session_id=model.session_id, level=model.log.level, debug=model.log.debug)
        if use_logging
        else NoopHooks()
    )

    # 1) Path provider over the configured routing backend
    router = router or make_router(model.router)
    paths = RoutedPathProvider(router, epsilon=model.editor.coord_epsilon)

    # 2) Snap index over the loaded feeds
    feeds = list(feeds)
    snap_index = SnapIndex.from_feeds(feeds, min_zoom=model.snap.min_zoom)

    # 3) Editor & session
    editor = SegmentEditor(
        paths,
        snap_index,
        follow_road=model.editor.follow_road,
        default_spacing_m=model.editor.default_spacing_m,
        snap_radius_pixels=model.snap.radius_pixels,
        epsilon=model.editor.coord_epsilon,
    )
    session = EditSession(
        modification, editor, hooks, allow_extend=model.editor.allow_extend, feeds=feeds
    )

    # 4) Export
    recorder = None
    if model.export.record:
        path = model.export.record_path
        recorder = Recorder(JsonlFileSink(path) if path else JsonlSink())
    exporter = Exporter(auto_stops=model.export.auto_stops, hooks=hooks, recorder=recorder)

    return App(model, router, paths, snap_index, editor, session, exporter)
