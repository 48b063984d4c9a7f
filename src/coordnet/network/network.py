"""Networks of coordinate systems and the transformations between them.

The usual workflow is::

    net = CoordinateNetwork()
    net.connect_systems("A", ShiftDynamicTransform("A_to_B"), "B")
    net.connect_systems("B", ShiftStaticTransform([1, 0, 0]), "C")
    net.compile()

    net.update({"A_to_B": [-1, 0, 0]})
    net.transform_vec([0, 0, 0], "A", "C")  # array([0., 0., 0.])

    net.update({"A_to_B": [1, 0, 0]})
    net.transform_vec([0, 0, 0], "A", "C")  # array([2., 0., 0.])

Edges are declared first, routes are compiled once, and afterwards the
network is updated and queried as often as needed.
"""

from __future__ import annotations

from logging import DEBUG, INFO

import numpy as np

from ..core.errors import UnknownSystem
from ..core.logging import get_logger
from ..core.types import MutableVector, State, Vector3
from ..geometry.euclidean import Affine, Euclidean
from ..geometry.quaternion import UnitQuaternion
from .system import CoordinateSystem
from .transform import Transform

logger = get_logger(__name__)


class CoordinateNetwork:
    """Graph of named coordinate systems (nodes) joined by transforms (edges).

    ``systems`` owns every node. Nodes refer to each other by name only.
    """

    def __init__(self) -> None:
        self.systems: dict[str, CoordinateSystem] = {}
        self.compiled = False

    @property
    def names(self) -> list[str]:
        return list(self.systems)

    def __contains__(self, name: object) -> bool:
        return name in self.systems

    def __len__(self) -> int:
        return len(self.systems)

    def _get_or_create(self, name: str) -> CoordinateSystem:
        system = self.systems.get(name)
        if system is None:
            system = self.systems[name] = CoordinateSystem(name, self.systems)
        return system

    def connect_systems(
        self, first: str, transform: Transform, second: str, one_way: bool = False
    ) -> CoordinateNetwork:
        """Connect system ``first`` to system ``second`` with ``transform``.

        Systems are created on first mention. Unless ``one_way``, the inverse
        of ``transform`` connects ``second`` back to ``first``.

        Args:
            first: Name of the system ``transform`` maps from
            transform: Transform from ``first`` coordinates to ``second`` coordinates
            second: Name of the system ``transform`` maps to
            one_way: Do not attach the inverse edge

        Returns:
            The network, for chaining
        """
        start = self._get_or_create(first)
        end = self._get_or_create(second)
        start.attach_neighbor(end, transform, one_way)

        if self.compiled:
            logger.warning(
                "Systems connected after compile, cached routes may be stale",
                {"first": first, "second": second},
            )
        if logger.is_enabled_for(DEBUG):
            logger.debug(
                f"Connected {first} -> {second}",
                {"transform": repr(transform), "one_way": one_way},
            )
        return self

    def compile(self) -> CoordinateNetwork:
        """Discover the shortest route between every pair of systems.

        Call once after every edge is declared and before the first query.
        """
        with logger.timed(f"Compiled network with {len(self.systems)} systems", INFO) as fields:
            for system in self.systems.values():
                for name in self.systems:
                    system.discover_downstream_for(name)
            self.compiled = True

            n_routes = sum(len(system.downstream) for system in self.systems.values())
            fields["routes"] = n_routes
            fields["unreachable"] = len(self.systems) ** 2 - n_routes
        return self

    def update(self, state: State) -> CoordinateNetwork:
        """Hand dynamic data to every transform. Unknown keys are ignored."""
        for system in self.systems.values():
            system.update(state)
        return self

    def _system_or_error(self, name: str) -> CoordinateSystem:
        system = self.systems.get(name)
        if system is None:
            raise UnknownSystem(f"Coordinate network cannot find system '{name}'")
        return system

    def _start_for(self, start_name: str, end_name: str) -> CoordinateSystem:
        start = self._system_or_error(start_name)
        self._system_or_error(end_name)
        return start

    def path(self, start_name: str, end_name: str) -> list[str]:
        """Hops from ``start_name`` to ``end_name``, excluding the start."""
        return list(self._start_for(start_name, end_name)._stream_or_error(end_name))

    # ---------
    # Positions
    # ---------

    def transform_vec(self, vec: Vector3, start_name: str, end_name: str) -> np.ndarray:
        """Express a position given in ``start_name`` in ``end_name`` coordinates."""
        return self._start_for(start_name, end_name).transform_vec_to(vec, end_name)

    def transform_vec_ip(self, vec: MutableVector, start_name: str, end_name: str) -> None:
        self._start_for(start_name, end_name).transform_vec_to_ip(vec, end_name)

    # ------------
    # Orientations
    # ------------

    def transform_quat(
        self, quat: UnitQuaternion, start_name: str, end_name: str
    ) -> UnitQuaternion:
        """Relabel an orientation quaternion into ``end_name`` axes."""
        return self._start_for(start_name, end_name).transform_quat_to(quat, end_name)

    def transform_quat_ip(self, quat: UnitQuaternion, start_name: str, end_name: str) -> None:
        self._start_for(start_name, end_name).transform_quat_to_ip(quat, end_name)

    def orient(self, quat: UnitQuaternion, start_name: str, end_name: str) -> UnitQuaternion:
        """Re-reference an orientation quaternion against ``end_name``."""
        return self._start_for(start_name, end_name).orient_to(quat, end_name)

    def orient_ip(self, quat: UnitQuaternion, start_name: str, end_name: str) -> None:
        self._start_for(start_name, end_name).orient_to_ip(quat, end_name)

    # ---------------
    # Euclidean forms
    # ---------------

    def get_euclidean(self, start_name: str, end_name: str) -> Euclidean:
        """Single Euclidean equivalent to the route from start to end.

        Raises:
            UnknownSystem: If either system is not in the network
            PathNotFound: If the systems are not connected
            NonEuclideanTransform: If any edge on the route is not Euclidean
        """
        return self._start_for(start_name, end_name).get_euclidean_transform_to(end_name)

    def get_affine(self, start_name: str, end_name: str) -> Affine:
        """``Affine(A, b)`` such that ``A @ v + b`` maps start coordinates to end coordinates."""
        return self.get_euclidean(start_name, end_name).affine

    def get_homogeneous(self, start_name: str, end_name: str) -> np.ndarray:
        """4x4 homogeneous form of :meth:`get_affine`."""
        return self.get_euclidean(start_name, end_name).matrix

    def __repr__(self) -> str:
        return f"CoordinateNetwork(systems={self.names}, compiled={self.compiled})"


__all__ = ["CoordinateNetwork"]
