"""Coordinate systems, the nodes of a coordinate network.

Nodes never hold each other directly. Each node keeps a handle to the
network's name to node mapping and resolves neighbors through it, so the
cyclic graph is owned by a single dictionary.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

import numpy as np

from ..core.errors import NonEuclideanTransform, PathNotFound, UnknownSystem
from ..core.types import MutableVector, State, Vector3, as_vector, check_length
from ..geometry.euclidean import Euclidean
from ..geometry.quaternion import UnitQuaternion
from .transform import Transform


class CoordinateSystem:
    """A named node holding its outgoing transforms and cached routes.

    ``downstream[target]`` is the list of hops (neighbor names, ending with
    ``target``) of the shortest known route; ``downstream[self.name]`` is
    empty. Targets without a known route are absent.
    """

    def __init__(self, name: str, systems: Mapping[str, CoordinateSystem] | None = None):
        self.name = name
        self._systems = systems if systems is not None else {name: self}
        self.transforms: dict[str, Transform] = {}
        self.downstream: dict[str, list[str]] = {name: []}

    @property
    def neighbors(self) -> dict[str, CoordinateSystem]:
        return {name: self._systems[name] for name in self.transforms}

    def attach_neighbor(
        self, other: CoordinateSystem, transform: Transform, one_way: bool = False
    ) -> CoordinateSystem:
        """Add a direct edge to ``other``.

        A direct edge is always the shortest route, so it replaces any cached
        route. Unless ``one_way``, ``other`` gets the inverse edge back.
        """
        if self._systems.get(other.name) is not other:
            raise UnknownSystem(f"'{other.name}' is not part of the network of '{self.name}'")
        self.transforms[other.name] = transform
        self.downstream[other.name] = [other.name]
        if not one_way:
            other.attach_neighbor(self, transform.inv, True)
        return self

    def discover_downstream_for(self, name: str) -> CoordinateSystem:
        """Search the graph for the shortest route to ``name`` and cache it."""
        stream = self._query_neighbors_for(name, [])
        if stream is None:
            return self
        stream = stream[1:]
        current = self.downstream.get(name)
        if current is None or len(current) > len(stream):
            self.downstream[name] = stream
        return self

    def _query_neighbors_for(self, name: str, exclude: list[str]) -> list[str] | None:
        # Returns the route including this node's own name
        if self.name == name:
            return [name]

        exclude = exclude + [self.name]
        stream = self.downstream.get(name)
        for neighbor in self.transforms:
            if neighbor in exclude:
                continue
            # Each branch gets its own exclusion list so both ways around a
            # loop are explored
            candidate = self._systems[neighbor]._query_neighbors_for(name, exclude)
            if candidate is None:
                continue
            if stream is None or len(stream) > len(candidate):
                stream = candidate

        if stream is None:
            return None
        self.downstream[name] = list(stream)
        return [self.name] + stream

    def _stream_or_error(self, name: str) -> list[str]:
        stream = self.downstream.get(name)
        if stream is None:
            raise PathNotFound(f"Coordinate system '{self.name}' cannot find '{name}'")
        return stream

    def _hops(self, name: str) -> Iterator[tuple[str, str, Transform]]:
        """Yield ``(from_name, to_name, transform)`` along the route to ``name``."""
        system = self
        for hop in self._stream_or_error(name):
            yield system.name, hop, system.transforms[hop]
            system = self._systems[hop]

    def transform_vec_to(self, vec: Vector3, name: str) -> np.ndarray:
        out = np.array(as_vector(vec, 3), dtype=np.float64)
        for _, _, transform in self._hops(name):
            out = transform.transform_vec(out)
        return out

    def transform_vec_to_ip(self, vec: MutableVector, name: str) -> None:
        check_length(vec, 3)
        for _, _, transform in self._hops(name):
            transform.transform_vec_ip(vec)

    def transform_quat_to(self, quat: UnitQuaternion, name: str) -> UnitQuaternion:
        out = quat.copy()
        for _, _, transform in self._hops(name):
            out = transform.transform_quat(out)
        return out

    def transform_quat_to_ip(self, quat: UnitQuaternion, name: str) -> None:
        for _, _, transform in self._hops(name):
            transform.transform_quat_ip(quat)

    def orient_to(self, quat: UnitQuaternion, name: str) -> UnitQuaternion:
        out = quat.copy()
        for _, _, transform in self._hops(name):
            out = transform.orient(out)
        return out

    def orient_to_ip(self, quat: UnitQuaternion, name: str) -> None:
        for _, _, transform in self._hops(name):
            transform.orient_ip(quat)

    def get_euclidean_transform_to(self, name: str) -> Euclidean:
        """Fold every edge on the route to ``name`` into one Euclidean.

        Raises:
            PathNotFound: If there is no route to ``name``
            NonEuclideanTransform: If an edge on the route is not Euclidean
        """
        euc = Euclidean()
        for start, end, transform in self._hops(name):
            if not transform.is_euclidean:
                raise NonEuclideanTransform(f"Transform {start} to {end} is non euclidean")
            if transform.is_inverse:
                euc.set_as_before(transform.get_inv().euclidean.get_inv())
            else:
                euc.set_as_before(transform.euclidean)
        return euc

    def update(self, state: State) -> CoordinateSystem:
        for transform in self.transforms.values():
            transform.update(state)
        return self

    def __repr__(self) -> str:
        return f"CoordinateSystem({self.name!r}, neighbors={list(self.transforms)})"


__all__ = ["CoordinateSystem"]
