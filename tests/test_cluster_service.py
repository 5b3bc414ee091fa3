import pytest

from conftest import make_item
from core.models import TagFilter
from core.services.cluster_service import GAP_THRESHOLD_MS, ClusterService, cluster_items


def _timestamps(clusters):
    return [[it.timestamp for it in c.items] for c in clusters]


def test_gap_measured_from_previous_survivor():
    # 3_600_001 - 1_000 is below the threshold, so no split
    items = [make_item(0, 0), make_item(1, 1_000), make_item(2, 3_600_001)]
    assert _timestamps(cluster_items(items)) == [[0, 1_000, 3_600_001]]


def test_split_when_gap_exceeds_threshold():
    items = [make_item(0, 0), make_item(1, 1_000), make_item(2, 3_601_001)]
    clusters = cluster_items(items)
    assert _timestamps(clusters) == [[0, 1_000], [3_601_001]]
    assert [c.timestamp for c in clusters] == [0, 3_601_001]


def test_gap_equal_to_threshold_stays_together():
    items = [make_item(0, 0), make_item(1, GAP_THRESHOLD_MS)]
    assert _timestamps(cluster_items(items)) == [[0, GAP_THRESHOLD_MS]]


def test_required_and_excluded_tags():
    items = [
        make_item(0, 0, tags=["cat"]),
        make_item(1, 10, tags=["dog"]),
        make_item(2, 20, tags=["cat", "dog"]),
    ]
    clusters = cluster_items(items, required={"cat"}, excluded={"dog"})
    assert len(clusters) == 1
    assert [it.identity for it in clusters[0].items] == ["0.jpg"]


def test_gaps_measured_on_survivors():
    hour = GAP_THRESHOLD_MS
    items = [
        make_item(0, 0, tags=["keep"]),
        make_item(1, hour, tags=["drop"]),
        make_item(2, 2 * hour, tags=["keep"]),
    ]
    assert len(cluster_items(items)) == 1
    # Without the middle item the survivors are two hours apart
    assert len(cluster_items(items, excluded={"drop"})) == 2


def test_filter_correctness_holds_for_every_item():
    items = [make_item(i, i * 1000, tags=["x"] if i % 2 else ["x", "y"]) for i in range(10)]
    for cluster in cluster_items(items, required={"x"}, excluded={"y"}):
        for it in cluster.items:
            assert "x" in it.tags and "y" not in it.tags


@pytest.mark.parametrize(
    "items",
    [
        [],
        [make_item(0, 0, tags=["dog"])],
    ],
)
def test_empty_results(items):
    assert cluster_items(items, excluded={"dog"}) == []


def test_single_item_single_cluster():
    clusters = cluster_items([make_item(0, 42)])
    assert len(clusters) == 1 and clusters[0].timestamp == 42 and len(clusters[0]) == 1


def test_deterministic(items_three_clusters):
    service = ClusterService()
    assert service.cluster(items_three_clusters) == service.cluster(items_three_clusters)


def test_service_applies_filter_and_threshold(items_three_clusters):
    service = ClusterService(gap_threshold_ms=10 * GAP_THRESHOLD_MS)
    assert service.gap_threshold_ms == 10 * GAP_THRESHOLD_MS
    assert len(service.cluster(items_three_clusters)) == 1
    assert service.cluster(items_three_clusters, TagFilter(required=frozenset({"x"}))) == []


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        ClusterService(gap_threshold_ms=-1)
