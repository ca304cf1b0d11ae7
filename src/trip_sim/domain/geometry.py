# domain/geometry.py
"""Great-circle helpers over (lon, lat) coordinates in decimal degrees."""

import math
from collections.abc import Sequence

EARTH_RADIUS_KM = 6371.0

Coord = tuple[float, float]  # (lon, lat)


def haversine_km(a: Coord, b: Coord) -> float:
    lon1, lat1 = a
    lon2, lat2 = b
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    h = (
        math.sin(dphi / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlmb / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def cumulative_distances(coords: Sequence[Coord]) -> tuple[list[float], float]:
    """Running distance (km) from ``coords[0]`` at each sample, plus the total."""
    table = [0.0]
    total = 0.0
    for prev, cur in zip(coords, coords[1:]):
        total += haversine_km(prev, cur)
        table.append(total)
    return table, total


def bearing_deg(a: Coord, b: Coord) -> float:
    """Initial bearing from a to b, normalized to [0, 360)."""
    lon1, lat1 = a
    lon2, lat2 = b
    dlmb = math.radians(lon2 - lon1)
    p1, p2 = math.radians(lat1), math.radians(lat2)
    y = math.sin(dlmb) * math.cos(p2)
    x = math.cos(p1) * math.sin(p2) - math.sin(p1) * math.cos(p2) * math.cos(dlmb)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def nearest_index(table: Sequence[float], target_km: float) -> int:
    """
    Index whose cumulative distance is closest to ``target_km``.

    Linear scan; on ties the first index seen wins (strict ``<``). Every
    generator placing something "at distance X" goes through here.
    """
    best = 0
    best_diff = abs(table[0] - target_km)
    for i in range(1, len(table)):
        diff = abs(table[i] - target_km)
        if diff < best_diff:
            best, best_diff = i, diff
    return best
