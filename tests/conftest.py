import matplotlib

matplotlib.use("Agg")

import pytest

from tour_graph import Graph


def _make_graph(edge_list):
    graph = Graph()
    for id_a, weight, id_b in edge_list:
        graph.connect(id_a, id_b, weight)
    return graph


def _complete_graph(ids, weight=lambda a, b: 1):
    graph = Graph()
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            graph.connect(a, b, weight(a, b))
    return graph


@pytest.fixture
def make_graph():
    return _make_graph


@pytest.fixture
def complete_graph():
    return _complete_graph


@pytest.fixture
def triangle():
    return _make_graph([("A", 1, "B"), ("B", 2, "C"), ("C", 3, "A")])
