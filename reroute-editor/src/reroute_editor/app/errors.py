# app/errors.py


class RerouteError(Exception):
    """Base class for reroute editing and export failures."""


class InvariantViolation(RerouteError, RuntimeError):
    """An editor operation produced an invalid chain (a defect, never retried)."""

    def __init__(self, op: str, reason: str | None = None):
        self.op, self.reason = op, reason
        msg = f"chain is not valid after {op}"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class ExportMismatch(RerouteError, ValueError):
    """Declared from/to stop disagrees with the chain's boundary stop."""

    def __init__(self, end: str, expected: str, actual: str | None):
        self.end, self.expected, self.actual = end, expected, actual
        super().__init__(f"{end} stop of reroute is {actual!r}, expected {expected!r}")


class PathProviderFailure(RerouteError, RuntimeError):
    """Routing capability errored or timed out; the edit was aborted."""
