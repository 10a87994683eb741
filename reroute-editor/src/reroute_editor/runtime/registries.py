# runtime/registries.py
from collections.abc import Callable
from typing import Any

from reroute_editor.app.protocols import RoutingBackend
from reroute_editor.config.models import RouterOsrmModel, RouterStraightModel, RouterUnion
from reroute_editor.domain.mechanics.mechanics_routers import OsrmRouter, StraightRouter

RouterFactory = Callable[[RouterUnion, dict[str, Any]], RoutingBackend]

_router_registry: dict[str, RouterFactory] = {}


# ------------------- Routing backends ---------------------------


def register_router(kind: str):
    def deco(fn: RouterFactory):
        _router_registry[kind] = fn
        return fn

    return deco


def make_router(cfg: RouterUnion, *, deps: dict | None = None) -> RoutingBackend:
    try:
        factory = _router_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown router kind {cfg.kind!r}") from None
    return factory(cfg, deps or {})


@register_router("straight")
def _make_straight(cfg: RouterStraightModel, deps):
    return StraightRouter()


@register_router("osrm")
def _make_osrm(cfg: RouterOsrmModel, deps):
    # deps["client"] lets callers inject a preconfigured httpx.AsyncClient
    return OsrmRouter(cfg.base_url, cfg.profile, cfg.timeout_s, client=deps.get("client"))
