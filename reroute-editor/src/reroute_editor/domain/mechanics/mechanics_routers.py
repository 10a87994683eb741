import httpx

from reroute_editor.app.errors import PathProviderFailure
from reroute_editor.app.protocols import RoutingBackend
from reroute_editor.domain.entities.geography import Coord


class StraightRouter(RoutingBackend):
    """Fallback when no routing service is configured."""

    async def route(self, a: Coord, b: Coord):
        return [a, b]


class OsrmRouter(RoutingBackend):
    """
    OSRM ``/route`` service returning GeoJSON geometries.

    Without an injected ``client`` each request opens its own ``AsyncClient``,
    so the router works across separate event loops (one ``asyncio.run`` per
    edit). An injected client is reused and owned by the caller.
    """

    def __init__(
        self,
        base_url: str,
        profile: str = "driving",
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self.profile = profile
        self.timeout_s = timeout_s
        self._client = client

    async def _get(self, path: str, params: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(path, params=params)
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_s) as client:
            return await client.get(path, params=params)

    async def route(self, a: Coord, b: Coord):
        path = f"/route/v1/{self.profile}/{a[0]},{a[1]};{b[0]},{b[1]}"
        response = await self._get(path, {"overview": "full", "geometries": "geojson"})
        response.raise_for_status()
        data = response.json()
        if data.get("code") != "Ok" or not data.get("routes"):
            raise PathProviderFailure(
                f"OSRM returned {data.get('code')!r}: {data.get('message', 'no route')}"
            )
        return data["routes"][0]["geometry"]["coordinates"]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
