"""Tests for coordinate systems and the coordinate network."""

import logging
import math

import numpy as np
import pytest

from coordnet.core.errors import NonEuclideanTransform, PathNotFound, UnknownSystem
from coordnet.geometry.quaternion import UnitQuaternion
from coordnet.network import (
    CoordinateNetwork,
    CoordinateSystem,
    EuclideanCompositeTransform,
    EuclideanReverseStaticTransform,
    EuclideanStaticTransform,
    PinholeCameraTransform,
    QuaternionKey,
    RotateDynamicTransform,
    RotateStaticTransform,
    ShiftDynamicTransform,
    ShiftStaticTransform,
    Transform,
)

# Named tolerances for tests
ABS_TOL = 1e-9

ISQRT2 = 1 / math.sqrt(2)

PINHOLE_Q = [
    [0, 0, 0, -1],
    [0, 0, 0, -1],
    [0, 0, 0, 3],
    [0, 0, 0.5, 0],
]


def _rigid_network() -> CoordinateNetwork:
    """Chain of rotations and shifts declared in both directions."""
    return (
        CoordinateNetwork()
        .connect_systems("a", EuclideanStaticTransform([ISQRT2, ISQRT2, 0, 0], [0, 1, 0]), "b")
        .connect_systems("c", EuclideanReverseStaticTransform([0.5, 0.5, 0.5, 0.5], [1, 2, 3]), "b")
        .connect_systems("c", RotateStaticTransform(0.3, [1, 2, 0]), "d")
        .connect_systems("e", ShiftStaticTransform([-1, 0, 4]), "d")
        .compile()
    )


def test_system_construction():
    """Test a new system reaches only itself."""
    c = CoordinateSystem("a")
    assert c.name == "a"
    assert c.downstream == {"a": []}
    assert c.neighbors == {}


def test_network_construction():
    """Test systems are created on first mention only."""
    n = CoordinateNetwork()
    assert len(n.systems) == 0

    n.connect_systems("a", Transform(), "b")
    assert n.systems["a"].name == "a"
    assert n.systems["b"].name == "b"

    n.connect_systems("a", Transform(), "b")
    assert len(n.systems) == 2
    assert "a" in n and "q" not in n
    assert n.names == ["a", "b"]


def test_neighbors_resolve_through_network():
    """Test neighbors are looked up by name in the owning network."""
    n = CoordinateNetwork().connect_systems("a", Transform(), "b")
    assert n.systems["a"].neighbors == {"b": n.systems["b"]}
    assert n.systems["b"].neighbors == {"a": n.systems["a"]}
    assert n.systems["b"].transforms["a"] is n.systems["a"].transforms["b"].inv


def test_attach_foreign_system_fails():
    """Test systems from another network cannot be attached."""
    n = CoordinateNetwork().connect_systems("a", Transform(), "b")
    with pytest.raises(UnknownSystem):
        n.systems["a"].attach_neighbor(CoordinateSystem("x"), Transform())


def test_compile_finds_shortest_routes(cycle_network):
    """Test compiled routes take the fewest hops around the loop."""
    systems = cycle_network.systems
    assert systems["a"].downstream["f"] == ["b", "c", "f"]
    assert systems["a"].downstream["e"] == ["b", "d", "e"]
    assert systems["f"].downstream["a"] == ["c", "b", "a"]
    assert systems["z"].downstream["y"] == ["y"]
    assert "z" not in systems["a"].downstream


def test_every_route_is_minimal(cycle_network):
    """Test all compiled routes in the component have the expected lengths."""
    systems = cycle_network.systems
    expected = {
        ("a", "b"): 1, ("a", "c"): 2, ("a", "d"): 2, ("a", "e"): 3, ("a", "f"): 3,
        ("d", "c"): 2, ("e", "c"): 2, ("e", "b"): 2, ("c", "d"): 2, ("f", "b"): 2,
    }
    for (start, end), hops in expected.items():
        assert len(systems[start].downstream[end]) == hops, (start, end)


def test_compile_is_idempotent(cycle_network):
    """Test compiling twice leaves the routes unchanged."""
    before = {name: dict(s.downstream) for name, s in cycle_network.systems.items()}
    cycle_network.compile()
    after = {name: dict(s.downstream) for name, s in cycle_network.systems.items()}
    assert before == after


def test_path(cycle_network):
    """Test path returns a copy of the cached route."""
    path = cycle_network.path("a", "f")
    assert path == ["b", "c", "f"]
    path.append("x")
    assert cycle_network.path("a", "f") == ["b", "c", "f"]
    assert cycle_network.path("a", "a") == []


def test_single_hop(shift_network):
    """Test transforming across one edge."""
    np.testing.assert_allclose(shift_network.transform_vec([0, 0, 0], "a", "b"), [1, 0, 0])


def test_multiple_hops(shift_network):
    """Test transforming across several edges, including inverse ones."""
    np.testing.assert_allclose(shift_network.transform_vec([0, 0, 0], "a", "c"), [1, 1, 0])
    np.testing.assert_allclose(shift_network.transform_vec([0, 0, 0], "a", "d"), [1, 0, 1])
    np.testing.assert_allclose(shift_network.transform_vec([0, 0, 0], "a", "f"), [1, 0, 0])
    np.testing.assert_allclose(shift_network.transform_vec([1, 0, 0], "b", "a"), [0, 0, 0])


def test_same_system(shift_network):
    """Test a zero-hop query returns an unchanged copy."""
    v = np.array([1.0, 2.0, 3.0])
    out = shift_network.transform_vec(v, "c", "c")
    np.testing.assert_allclose(out, v)
    assert out is not v


def test_transform_vec_ip(shift_network):
    """Test in-place transformation of a list."""
    v = [0.0, 0.0, 0.0]
    shift_network.transform_vec_ip(v, "a", "c")
    np.testing.assert_allclose(v, [1, 1, 0])


def test_transform_vec_ip_rejects_integer_arrays(shift_network):
    """Test in-place transformation refuses arrays that would truncate the result."""
    v = np.array([0, 0, 0])
    with pytest.raises(TypeError):
        shift_network.transform_vec_ip(v, "a", "b")
    np.testing.assert_array_equal(v, [0, 0, 0])

    w = np.zeros(3, dtype=np.float32)
    shift_network.transform_vec_ip(w, "a", "b")
    np.testing.assert_allclose(w, [1, 0, 0])


def test_unknown_system(shift_network):
    """Test non-existent systems cannot be transformed with respect to."""
    with pytest.raises(UnknownSystem):
        shift_network.transform_vec([0, 0, 0], "q", "b")
    with pytest.raises(UnknownSystem):
        shift_network.transform_vec([0, 0, 0], "a", "q")
    with pytest.raises(UnknownSystem):
        shift_network.get_affine("q", "a")


def test_disconnected_systems(shift_network):
    """Test unconnected systems cannot be transformed between."""
    with pytest.raises(PathNotFound):
        shift_network.transform_vec([0, 0, 0], "a", "z")
    with pytest.raises(PathNotFound):
        shift_network.transform_vec([0, 0, 0], "y", "f")
    with pytest.raises(PathNotFound):
        shift_network.path("z", "a")


def test_one_way_connection():
    """Test one-way edges cannot be traversed backwards."""
    n = (
        CoordinateNetwork()
        .connect_systems("a", ShiftStaticTransform([1, 0, 0]), "b", one_way=True)
        .compile()
    )
    np.testing.assert_allclose(n.transform_vec([0, 0, 0], "a", "b"), [1, 0, 0])
    with pytest.raises(PathNotFound):
        n.transform_vec([0, 0, 0], "b", "a")


def test_update():
    """Test dynamic data reaches every edge."""
    n = (
        CoordinateNetwork()
        .connect_systems("a", ShiftDynamicTransform("atb"), "b")
        .connect_systems("b", ShiftDynamicTransform("btc"), "c")
        .compile()
    )
    n.update({"atb": [1, 0, 0], "btc": [0, 1, 0]})
    np.testing.assert_allclose(n.transform_vec([0, 0, 0], "a", "c"), [1, 1, 0])

    n.update({"atb": [2, 0, 0], "btc": [0, 2, 0]})
    np.testing.assert_allclose(n.transform_vec([0, 0, 0], "a", "c"), [2, 2, 0])

    # Partial and unrelated state
    n.update({"atb": [3, 0, 0], "unrelated": 1.0})
    np.testing.assert_allclose(n.transform_vec([0, 0, 0], "a", "c"), [3, 2, 0])
    np.testing.assert_allclose(n.transform_vec([0, 0, 0], "c", "a"), [-3, -2, 0])


def test_update_overrides_single_edge():
    """Test a second update fully replaces the first."""
    n = CoordinateNetwork().connect_systems("a", ShiftDynamicTransform("atb"), "b").compile()
    n.update({"atb": [1, 0, 0]})
    n.update({"atb": [2, 0, 0]})
    np.testing.assert_allclose(n.transform_vec([0, 0, 0], "a", "b"), [2, 0, 0])


def test_transform_quat():
    """Test relabelling an orientation along a chain of rotations."""
    n = (
        CoordinateNetwork()
        .connect_systems("a", Transform(), "b")
        .connect_systems("b", RotateStaticTransform(-math.pi / 2, [1, 0, 0]), "c")
        .connect_systems("c", RotateStaticTransform(math.pi / 2, [0, 1, 0]), "d")
        .compile()
    )
    q = UnitQuaternion.from_axis(math.pi / 2, [1, 0, 0])
    expected = [ISQRT2, 0, 0, ISQRT2]

    np.testing.assert_allclose(n.transform_quat(q, "a", "d").qvec, expected, atol=ABS_TOL)
    np.testing.assert_allclose(q.qvec, [ISQRT2, ISQRT2, 0, 0], atol=ABS_TOL)

    back = n.transform_quat(n.transform_quat(q, "a", "d"), "d", "a")
    np.testing.assert_allclose(back.qvec, q.qvec, atol=ABS_TOL)

    n.transform_quat_ip(q, "a", "d")
    np.testing.assert_allclose(q.qvec, expected, atol=ABS_TOL)


def test_orient():
    """Test re-referencing an orientation along a path."""
    o1 = UnitQuaternion.from_axis(0.4, [0, 0, 1])
    o2 = UnitQuaternion.from_axis(-0.9, [1, 1, 0])
    n = (
        CoordinateNetwork()
        .connect_systems("a", RotateStaticTransform(o1.qvec), "b")
        .connect_systems("c", RotateDynamicTransform(QuaternionKey("o2")), "b")
        .compile()
    )
    n.update({"o2": o2.qvec})
    q = UnitQuaternion.from_axis(1.1, [0, 1, 0])

    expected = q.with_reference(o1).without_reference(o2)
    np.testing.assert_allclose(n.orient(q, "a", "c").qvec, expected.qvec, atol=ABS_TOL)

    n.orient_ip(q, "a", "c")
    np.testing.assert_allclose(q.qvec, expected.qvec, atol=ABS_TOL)
    n.orient_ip(q, "c", "a")
    original = UnitQuaternion.from_axis(1.1, [0, 1, 0])
    np.testing.assert_allclose(q.qvec, original.qvec, atol=ABS_TOL)


def test_affine_simple(shift_network):
    """Test the affine map across shifts."""
    affine = shift_network.get_affine("a", "c")
    np.testing.assert_allclose(affine.A, np.eye(3), atol=ABS_TOL)
    np.testing.assert_allclose(affine.b, [1, 1, 0], atol=ABS_TOL)


def test_affine_across_identity_edges(cycle_network):
    """Test identity edges fold into the identity affine map."""
    affine = cycle_network.get_affine("a", "f")
    np.testing.assert_allclose(affine.A, np.eye(3), atol=ABS_TOL)
    np.testing.assert_allclose(affine.b, [0, 0, 0], atol=ABS_TOL)

    n = (
        CoordinateNetwork()
        .connect_systems("a", ShiftStaticTransform([1, 0, 0]), "b")
        .connect_systems("b", Transform(), "c")
        .compile()
    )
    np.testing.assert_allclose(n.get_affine("c", "a").b, [-1, 0, 0], atol=ABS_TOL)
    np.testing.assert_allclose(n.get_homogeneous("a", "c")[:3, 3], [1, 0, 0], atol=ABS_TOL)


def test_affine_matches_transform_vec():
    """Test the folded Euclidean reproduces hop-by-hop transformation in both directions."""
    n = _rigid_network()
    for start, end in [("a", "e"), ("e", "a"), ("b", "d"), ("d", "a")]:
        affine = n.get_affine(start, end)
        homogeneous = n.get_homogeneous(start, end)
        for v in np.random.normal(size=(5, 3)):
            expected = n.transform_vec(v, start, end)
            np.testing.assert_allclose(affine.A @ v + affine.b, expected, atol=ABS_TOL)
            projected = homogeneous @ np.append(v, 1.0)
            np.testing.assert_allclose(projected[:3], expected, atol=ABS_TOL)


def test_get_euclidean_inverts():
    """Test the Euclidean of the reverse route is the inverse."""
    n = _rigid_network()
    forward = n.get_euclidean("a", "e")
    backward = n.get_euclidean("e", "a")
    np.testing.assert_allclose(forward.matrix @ backward.matrix, np.eye(4), atol=ABS_TOL)


def test_affine_with_composite_edges():
    """Test folded composites can be folded again."""
    composite = EuclideanCompositeTransform(
        RotateStaticTransform(0.7, [0, 0, 1]), ShiftDynamicTransform("s")
    )
    n = (
        CoordinateNetwork()
        .connect_systems("a", composite, "b")
        .connect_systems("b", ShiftStaticTransform([0, 0, 1]), "c")
        .compile()
    )
    n.update({"s": [1, 2, 3]})
    v = np.array([0.5, 0.5, 0.5])
    np.testing.assert_allclose(
        n.get_affine("c", "a").apply(v), n.transform_vec(v, "c", "a"), atol=ABS_TOL
    )


def test_affine_rejects_projective_edges():
    """Test affine extraction fails across pinhole edges, one hop or many."""
    n = (
        CoordinateNetwork()
        .connect_systems("world", ShiftStaticTransform([0, 0, 1]), "camera")
        .connect_systems("camera", PinholeCameraTransform("Q", PINHOLE_Q), "image")
        .connect_systems("image", ShiftStaticTransform([1, 0, 0]), "pixels")
        .compile()
    )
    for start, end in [
        ("camera", "image"),
        ("image", "camera"),
        ("world", "image"),
        ("world", "pixels"),
        ("pixels", "world"),
    ]:
        with pytest.raises(NonEuclideanTransform):
            n.get_affine(start, end)
        with pytest.raises(NonEuclideanTransform):
            n.get_homogeneous(start, end)

    # Positions still flow through the projective edge
    np.testing.assert_allclose(n.transform_vec([1, 1, 0], "world", "image"), [1.5, 1.5, 6])
    np.testing.assert_allclose(n.get_affine("world", "camera").b, [0, 0, 1])


def test_connect_after_compile_warns(cycle_network, caplog):
    """Test late connections flag stale routes."""
    with caplog.at_level(logging.WARNING, logger="coordnet.network.network"):
        cycle_network.connect_systems("f", Transform(), "g")
    assert "stale" in caplog.text
    assert cycle_network.compiled


def test_compile_logs_summary(caplog):
    """Test compile reports the size of the network."""
    n = CoordinateNetwork().connect_systems("a", Transform(), "b")
    with caplog.at_level(logging.INFO, logger="coordnet.network.network"):
        n.compile()
    assert "Compiled network with 2 systems" in caplog.text


class _CountingTransform(Transform):
    def __init__(self):
        super().__init__()
        self.reprs = 0

    def __repr__(self):
        self.reprs += 1
        return "CountingTransform()"


def test_connect_formats_debug_data_only_when_enabled(caplog):
    """Test edge descriptions are built only for enabled debug logging."""
    t = _CountingTransform()
    with caplog.at_level(logging.WARNING, logger="coordnet.network.network"):
        CoordinateNetwork().connect_systems("a", t, "b")
    assert t.reprs == 0

    with caplog.at_level(logging.DEBUG, logger="coordnet.network.network"):
        CoordinateNetwork().connect_systems("a", t, "b")
    assert t.reprs == 1
    assert "Connected a -> b" in caplog.text
