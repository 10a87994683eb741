# io/edit_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass

from reroute_editor.app.hooks import NoopHooks


def _default_json_logger(name="reroute_editor", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class EditLogging(NoopHooks):
    """
    Structured logs for edit lifecycle and exports.
    """

    def __init__(
        self,
        session_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.session_id, self.debug = session_id, debug
        self.log = logger or _default_json_logger(level=level)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"session_id": self.session_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _shape_edit(self, edit) -> dict:
        base = {"edit": type(edit).__name__}
        if is_dataclass(edit):
            base.update(asdict(edit))
        return base

    # --------------------------------------------------------

    def edit_start(self, edit, *, generation: int):
        if self.debug:
            self._emit("DEBUG", "edit_start", **self._shape_edit(edit), generation=generation)

    def edit_applied(self, edit, *, generation: int, segments: int):
        self._emit("INFO", "edit_applied", **self._shape_edit(edit), generation=generation, segments=segments)

    def edit_discarded(self, edit, *, base_generation: int, generation: int):
        self._emit(
            "WARNING",
            "edit_discarded",
            **self._shape_edit(edit),
            base_generation=base_generation,
            generation=generation,
        )

    def edit_failed(self, edit, *, exc: BaseException):
        self._emit(
            "ERROR",
            "edit_failed",
            **self._shape_edit(edit),
            error=str(exc),
            error_type=type(exc).__name__,
        )

    def snap_index_rebuilt(self, *, candidates: int, feeds):
        self._emit("INFO", "snap_index_rebuilt", candidates=candidates, feeds=list(feeds))

    def export(self, record, *, name: str):
        self._emit(
            "INFO",
            "export",
            modification=name,
            stops=len(record.stops),
            hops=len(record.hop_times),
            from_stop=record.from_stop,
            to_stop=record.to_stop,
        )
