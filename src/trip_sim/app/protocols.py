from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from trip_sim.domain.geometry import Coord


@runtime_checkable
class RouteProvider(Protocol):
    """
    Supplies the route path as ordered (lon, lat) pairs, start to end.
    Raises RouteNotFoundError when no usable route exists; never retries.
    """

    def coordinates(self) -> Sequence[Coord]: ...
