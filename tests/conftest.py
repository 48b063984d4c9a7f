import os
import random

import numpy as np
import pytest

from coordnet.network import CoordinateNetwork, ShiftStaticTransform, Transform


@pytest.fixture(autouse=True)
def seed_rng() -> None:
    random.seed(0)
    np.random.seed(0)
    os.environ["PYTHONHASHSEED"] = "0"


@pytest.fixture()
def cycle_network() -> CoordinateNetwork:
    """a-b-c, b-d-e-f-c closing a loop, plus the isolated pair y-z."""
    return (
        CoordinateNetwork()
        .connect_systems("a", Transform(), "b")
        .connect_systems("b", Transform(), "c")
        .connect_systems("b", Transform(), "d")
        .connect_systems("d", Transform(), "e")
        .connect_systems("e", Transform(), "f")
        .connect_systems("f", Transform(), "c")
        .connect_systems("y", Transform(), "z")
        .compile()
    )


@pytest.fixture()
def shift_network() -> CoordinateNetwork:
    """Same topology as ``cycle_network`` with a static shift on every edge."""
    return (
        CoordinateNetwork()
        .connect_systems("a", ShiftStaticTransform([1, 0, 0]), "b")
        .connect_systems("b", ShiftStaticTransform([0, 1, 0]), "c")
        .connect_systems("b", ShiftStaticTransform([0, 0, 1]), "d")
        .connect_systems("d", ShiftStaticTransform([0, 0, 1]), "e")
        .connect_systems("e", ShiftStaticTransform([0, 0, -2]), "f")
        .connect_systems("f", ShiftStaticTransform([0, 1, 0]), "c")
        .connect_systems("y", ShiftStaticTransform([1, 1, 1]), "z")
        .compile()
    )


@pytest.fixture()
def qvecs() -> list[np.ndarray]:
    """Random normalized quaternion vectors."""
    out = []
    for _ in range(10):
        q = np.random.normal(size=4)
        out.append(q / np.linalg.norm(q))
    return out
