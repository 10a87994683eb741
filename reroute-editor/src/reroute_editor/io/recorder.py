# io/recorder.py
import json
import sys

from reroute_editor.app.protocols import RecordSink


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, record) -> None:
        self.fp.write(json.dumps(record.to_wire()) + "\n")


class JsonlFileSink:
    def __init__(self, path: str):
        self.path = path

    def write(self, record) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record.to_wire()) + "\n")


class MemorySink:
    def __init__(self):
        self.records: list = []

    def write(self, record) -> None:
        self.records.append(record)


class Recorder:
    def __init__(self, *sinks: RecordSink):
        self.sinks: tuple[RecordSink, ...] = sinks or (JsonlSink(),)

    def emit(self, record) -> None:
        for s in self.sinks:
            s.write(record)
