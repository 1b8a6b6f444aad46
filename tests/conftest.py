"""
Shared fixtures of the test suite.
"""

import numpy as np
import pytest

import massrank.ansi
from massrank import Graph
from massrank.configuration import default as cfg


@pytest.fixture(autouse = True)
def silent():
    massrank.ansi.SILENT = True
    yield
    massrank.ansi.SILENT = False


@pytest.fixture
def restore_config():
    saved = dict(cfg.config)
    yield cfg
    cfg.config.clear()
    cfg.config.update(saved)


@pytest.fixture
def chain():
    """0 -> 1 -> 2, with 2 dangling and a uniform prior."""
    return Graph.from_dict(
        { 0: 1 / 3, 1: 1 / 3, 2: 1 / 3 },
        [(0, 1, 1.0), (1, 2, 1.0)]
    )


@pytest.fixture
def cycle():
    """0 -> 1 -> 2 -> 0 with a uniform prior."""
    return Graph.from_dict(
        { 0: 1 / 3, 1: 1 / 3, 2: 1 / 3 },
        [(0, 1, 1.0), (1, 2, 1.0), (2, 0, 1.0)]
    )


@pytest.fixture
def triangle():
    """Every vertex links to both others, with a skewed prior."""
    return Graph.from_dict(
        { 0: 0.5, 1: 0.25, 2: 0.25 },
        [
            (0, 1, 0.5), (0, 2, 0.5),
            (1, 0, 0.5), (1, 2, 0.5),
            (2, 0, 0.5), (2, 1, 0.5)
        ]
    )


@pytest.fixture
def random_graph():
    """
    16 vertices with out-degrees in {0, 1, 2, 4} and equal weights per
    source, so every weight and prior entry is exact in binary.
    """

    rng = np.random.default_rng(42)
    n = 16
    src, dst, weight = [], [], []
    for v in range(n):
        degree = int(rng.choice([0, 1, 2, 4]))
        others = [x for x in range(n) if x != v]
        for u in rng.choice(others, size = degree, replace = False):
            src.append(v)
            dst.append(int(u))
            weight.append(1.0 / degree)

    return Graph.from_arrays(range(n), np.full(n, 1 / n), src, dst, weight)


@pytest.fixture
def reference_step():
    """One round in matrix form, against which the engine is checked."""
    return matrix_step


def matrix_step(graph, teleport_prob):

    A = graph.adjacency()
    v = graph.vertices['value'].values
    n = len(v)
    dangling = np.asarray(A.sum(axis = 1)).ravel() == 0
    share = (1 - teleport_prob) / (n - 1)

    return (
        (1 - teleport_prob) * (A.T @ v) + teleport_prob / n
        - share * np.where(dangling, v, 0.0)
        + share * v[dangling].sum()
    )
