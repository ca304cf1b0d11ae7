# runtime/registries.py
from collections.abc import Callable

from trip_sim.app.protocols import RouteProvider
from trip_sim.config.models import RouteGeoJSONModel, RouteStaticModel, RouteUnion
from trip_sim.domain.route import RouteNotFoundError
from trip_sim.io.routes import load_geojson_route

RouteProviderFactory = Callable[[RouteUnion], RouteProvider]

_route_registry: dict[str, RouteProviderFactory] = {}


def register_route_provider(kind: str):
    def deco(fn: RouteProviderFactory):
        _route_registry[kind] = fn
        return fn

    return deco


def make_route_provider(cfg: RouteUnion) -> RouteProvider:
    try:
        factory = _route_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown route kind {cfg.kind!r}")
    return factory(cfg)


# ------------------- Route providers ---------------------------


class StaticRouteProvider:
    def __init__(self, coords):
        self._coords = [(float(c[0]), float(c[1])) for c in coords]

    def coordinates(self):
        if len(self._coords) < 2:
            raise RouteNotFoundError(f"route needs at least 2 coordinates, got {len(self._coords)}")
        return list(self._coords)


class GeoJSONRouteProvider:
    def __init__(self, path: str):
        self.path = path

    def coordinates(self):
        coords = load_geojson_route(self.path)
        if len(coords) < 2:
            raise RouteNotFoundError(f"{self.path}: route needs at least 2 coordinates")
        return coords


@register_route_provider("static")
def _static(cfg: RouteStaticModel) -> RouteProvider:
    return StaticRouteProvider(cfg.coordinates)


@register_route_provider("geojson")
def _geojson(cfg: RouteGeoJSONModel) -> RouteProvider:
    return GeoJSONRouteProvider(cfg.file)
