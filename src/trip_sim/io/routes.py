# io/routes.py
"""Loading route geometry from GeoJSON-like documents."""

import json
from pathlib import Path

from trip_sim.domain.route import RouteNotFoundError


def coordinates_from_geojson(doc: dict) -> list[tuple[float, float]]:
    """
    Accepts a LineString geometry, a Feature, a FeatureCollection (first
    LineString wins) or an OSRM route response (``routes[0].geometry``).
    """
    if "routes" in doc:
        routes = doc.get("routes") or []
        if not routes:
            raise RouteNotFoundError("no route found")
        return coordinates_from_geojson(routes[0]["geometry"])

    kind = doc.get("type")
    if kind == "FeatureCollection":
        for feat in doc.get("features", []):
            geom = feat.get("geometry") or {}
            if geom.get("type") == "LineString":
                return coordinates_from_geojson(geom)
        raise RouteNotFoundError("FeatureCollection has no LineString feature")
    if kind == "Feature":
        return coordinates_from_geojson(doc.get("geometry") or {})
    if kind == "LineString":
        return [(float(c[0]), float(c[1])) for c in doc.get("coordinates", [])]
    raise RouteNotFoundError(f"unsupported GeoJSON type {kind!r}")


def load_geojson_route(path: str | Path) -> list[tuple[float, float]]:
    with open(path, encoding="utf-8") as fp:
        return coordinates_from_geojson(json.load(fp))
