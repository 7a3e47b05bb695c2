import pytest

from conftest import make_nodes
from dotsphere.config import ForceSettings
from dotsphere.forces import (
    apply_cluster_force,
    cluster_centroids,
    force_config,
    link_distance,
    link_strength,
    link_width,
)
from dotsphere.models import Point3


@pytest.mark.parametrize(
    "weight,expected",
    [(1.0, 40.0), (0.0, 120.0), (0.5, 80.0), (None, 80.0)],
)
def test_link_distance(weight, expected: float) -> None:
    assert link_distance(weight) == pytest.approx(expected)


def test_link_strength_and_width() -> None:
    assert link_strength(1.0) == pytest.approx(0.9)
    assert link_strength(None) == pytest.approx(0.27)
    assert link_width(1.0) == pytest.approx(3.0)
    assert link_width(None) == pytest.approx(1.5)
    assert link_width(0.0) == 0.0


def test_force_config_exposes_simulation_constants() -> None:
    config = force_config()
    assert config["charge_strength"] == -200.0
    assert config["charge_distance_max"] == 1000.0
    assert config["velocity_decay"] == 0.4
    assert config["cluster_min_distance"] == 1500.0


def test_centroids_skip_unclustered_nodes() -> None:
    nodes = make_nodes("a", "b", "c")
    nodes[0].cluster, nodes[0].x = 0, 10.0
    nodes[1].cluster, nodes[1].x = 0, 30.0

    assert cluster_centroids(nodes) == {0: pytest.approx((20.0, 0.0, 0.0))}


def test_close_clusters_are_pushed_apart() -> None:
    a, b = make_nodes("a", "b")
    a.cluster = 0
    b.cluster, b.x = 1, 100.0

    apply_cluster_force([a, b], alpha=1.0)

    push = (1500.0 - 100.0) / 1500.0 * 500.0
    assert a.x == pytest.approx(-push)
    assert b.x == pytest.approx(100.0 + push)
    assert a.y == b.y == 0.0


def test_distant_clusters_are_left_alone() -> None:
    a, b = make_nodes("a", "b")
    a.cluster = 0
    b.cluster, b.x = 1, 2000.0

    apply_cluster_force([a, b], alpha=1.0)

    assert (a.x, b.x) == (0.0, 2000.0)


def test_coincident_centroids_do_not_blow_up() -> None:
    a, b = make_nodes("a", "b")
    a.cluster, b.cluster = 0, 1

    apply_cluster_force([a, b], alpha=1.0)

    assert (a.x, b.x) == (0.0, 0.0)


def test_strays_are_pulled_back_toward_their_center() -> None:
    (node,) = make_nodes("a")
    node.cluster = 0
    node.cluster_center = Point3(0.0, 0.0, 0.0)
    node.cluster_radius = 150.0
    node.x = 1000.0

    apply_cluster_force([node], alpha=0.5)

    assert node.x == pytest.approx(1000.0 - 1000.0 * 0.03 * 0.5)


def test_members_inside_radius_are_not_pulled() -> None:
    (node,) = make_nodes("a")
    node.cluster = 0
    node.cluster_center = Point3(0.0, 0.0, 0.0)
    node.cluster_radius = 150.0
    node.x = 100.0

    apply_cluster_force([node], alpha=1.0)

    assert node.x == 100.0


def test_fallback_cohesion_radius_applies_without_cluster_radius() -> None:
    (node,) = make_nodes("a")
    node.cluster = 0
    node.cluster_center = Point3(0.0, 0.0, 0.0)
    node.x = 250.0

    apply_cluster_force([node], alpha=1.0, settings=ForceSettings(cohesion_radius=300.0))
    assert node.x == 250.0

    node.x = 400.0
    apply_cluster_force([node], alpha=1.0)
    assert node.x == pytest.approx(400.0 * 0.97)
