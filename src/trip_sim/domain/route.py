# domain/route.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from trip_sim.domain.geometry import Coord, cumulative_distances, nearest_index


class RouteNotFoundError(ValueError):
    """Raised when no usable route (>= 2 coordinates) is available."""


@dataclass(frozen=True)
class Route:
    """Read-only route geometry with its cumulative-distance table."""

    coords: tuple[Coord, ...]
    distances: tuple[float, ...]
    total_km: float

    @classmethod
    def from_coords(cls, coords: Sequence[Sequence[float]]) -> Route:
        pts = tuple((float(c[0]), float(c[1])) for c in coords)
        if not pts:
            raise RouteNotFoundError("route has no coordinates")
        table, total = cumulative_distances(pts)
        return cls(coords=pts, distances=tuple(table), total_km=total)

    def __len__(self) -> int:
        return len(self.coords)

    def prefix(self, last_index: int) -> Route:
        """Route truncated to samples 0..last_index (inclusive)."""
        n = last_index + 1
        return Route(self.coords[:n], self.distances[:n], self.distances[:n][-1])

    def nearest_index(self, target_km: float) -> int:
        return nearest_index(self.distances, target_km)

    def clamp(self, i: int) -> int:
        return min(max(i, 0), len(self.coords) - 1)

    def point(self, i: int, **extra) -> dict:
        lon, lat = self.coords[i]
        return {"lat": lat, "lng": lon, **extra}
