# domain/validation.py
import logging

from reroute_editor.app.errors import InvariantViolation
from reroute_editor.domain.entities.geography import COORD_EPSILON, coords_equal
from reroute_editor.domain.entities.segments import SegmentChain

log = logging.getLogger(__name__)


def find_violation(chain: SegmentChain, epsilon: float = COORD_EPSILON) -> str | None:
    """Describe the first broken chain invariant, or None when the chain is valid."""
    if len(chain) <= 1:
        return None

    for i, seg in enumerate(chain):
        if seg.geometry.type != "LineString":
            return f"expected LineString geometry at {i}, got {seg.geometry.type}"

    for i in range(1, len(chain)):
        s0, s1 = chain[i - 1], chain[i]
        if s0.stop_at_end != s1.stop_at_start:
            return f"end stop flag does not match start stop flag of next segment at {i - 1}"
        if s0.to_stop_id != s1.from_stop_id:
            return f"end stop id does not match start stop id of next segment at {i - 1}"
        if not coords_equal(s0.last, s1.first, epsilon):
            return f"end coordinate does not match start coordinate of next segment at {i - 1}"
    return None


def validate(chain: SegmentChain, epsilon: float = COORD_EPSILON) -> bool:
    reason = find_violation(chain, epsilon)
    if reason:
        log.debug("invalid chain: %s", reason)
    return reason is None


def require_valid(chain: SegmentChain, op: str, epsilon: float = COORD_EPSILON) -> SegmentChain:
    reason = find_violation(chain, epsilon)
    if reason:
        raise InvariantViolation(op, reason)
    return chain
