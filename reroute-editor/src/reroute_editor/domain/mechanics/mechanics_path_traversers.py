from collections.abc import Sequence

from reroute_editor.domain.mechanics.mechanics_stops import StopDescriptor


def kmh_to_mps(speed_kmh: float) -> float:
    return speed_kmh / 3.6


def hop_times(stops: Sequence[StopDescriptor], speed_kmh: float) -> list[float]:
    """Seconds of travel between consecutive stops at a constant average speed."""
    if speed_kmh <= 0:
        raise ValueError(f"speed must be positive, got {speed_kmh}")
    v = kmh_to_mps(speed_kmh)
    return [(b.distance_from_start - a.distance_from_start) / v for a, b in zip(stops, stops[1:])]


def dwell_times(hops: Sequence[float], dwell_s: float) -> list[float]:
    # one more dwell than hops; uniform for now
    return [dwell_s] * (len(hops) + 1)
