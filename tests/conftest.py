"""
Pytest configuration and fixtures for the veb tree tests.

Provides:
- a tree over a 128-key universe
- a recursive structural invariant checker
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from veb import VEB  # noqa: E402


@pytest.fixture
def tree():
    return VEB(128)


def collect_keys(node):
    """Keys physically stored in node, including its min."""
    if node.is_empty():
        return []
    keys = {node.min(), node.max()}
    if not node.base_case:
        for h, cluster in node.clusters.items():
            keys.update(node.index(h, l) for l in collect_keys(cluster))
    return sorted(keys)


def check_invariants(node):
    """
    Assert the structural invariants of node and of its whole subtree.
    """
    if node.is_empty():
        assert node.min() is None and node.max() is None
        if not node.base_case:
            assert node.clusters == {}
        return

    assert node.min() <= node.max()
    assert 0 <= node.min() and node.max() < node.universe_size
    if node.size == 1:
        assert node.min() == node.max()

    if node.base_case:
        assert node.size == (1 if node.min() == node.max() else 2)
        return

    clustered = 0
    for h, cluster in node.clusters.items():
        # emptied clusters are dropped, never kept around empty
        assert not cluster.is_empty()
        assert cluster.universe_size == node.sqrt_size
        check_invariants(cluster)
        # min is held outside the clusters
        assert node.index(h, cluster.min()) > node.min()
        assert node.index(h, cluster.max()) <= node.max()
        clustered += cluster.size

    if node.clusters:
        assert node.summary is not None
        assert node.summary.universe_size == node.num_clusters
        check_invariants(node.summary)
        assert collect_keys(node.summary) == sorted(node.clusters)
        h = max(node.clusters)
        assert node.index(h, node.clusters[h].max()) == node.max()
    else:
        assert node.summary is None or node.summary.is_empty()
        assert node.min() == node.max()

    assert node.size == clustered + 1


@pytest.fixture
def invariants():
    return check_invariants
