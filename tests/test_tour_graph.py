import pytest

from tour_graph import Graph, NodeRegistry


class TestNodeRegistry:
    def test_get_or_create_is_idempotent(self):
        registry = NodeRegistry()
        first = registry.get_or_create("B")
        again = registry.get_or_create("B")
        assert first is again
        assert len(registry) == 1

    def test_first_node_is_entry(self):
        registry = NodeRegistry()
        for node_id in "DBA":
            registry.get_or_create(node_id)
        assert registry.nodes[registry.entry].id == "D"

    @pytest.mark.parametrize("order", ["ABCDE", "EDCBA", "CAEBD", "BDBAC", "ZAMAZ"])
    def test_chain_stays_ascending(self, order):
        registry = NodeRegistry()
        for node_id in order:
            registry.get_or_create(node_id)
        ids = [node.id for node in registry]
        assert ids == sorted(set(order))

    def test_entry_survives_smaller_ids(self):
        registry = NodeRegistry()
        registry.get_or_create("M")
        registry.get_or_create("A")
        assert registry.nodes[registry.entry].id == "M"
        assert registry.nodes[registry.head].id == "A"


class TestGraph:
    def test_connect_adds_symmetric_pair(self, triangle):
        assert len(triangle.edges) == 6
        for edge in triangle.edges:
            twin = triangle.edges[edge.reverse]
            assert twin.reverse == edge.index
            assert twin.source == edge.endpoint
            assert twin.endpoint == edge.source
            assert twin.weight == edge.weight

    def test_edges_keep_arrival_order(self, triangle):
        a = triangle.node("A")
        endpoints = [triangle.registry.nodes[edge.endpoint].id for edge in triangle.out_edges(a)]
        assert endpoints == ["B", "C"]

    def test_edge_ids_increase(self, triangle):
        ids = [edge.id for edge in triangle.edges]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_parallel_edges_and_self_loops_are_kept(self):
        graph = Graph()
        graph.connect("A", "B", 4)
        graph.connect("A", "B", 2)
        graph.connect("A", "A", 7)
        a = graph.node("A")
        weights = [edge.weight for edge in graph.out_edges(a)]
        assert weights == [4, 2, 7, 7]
        assert len(graph) == 2

    def test_negative_weights_are_stored(self):
        graph = Graph()
        graph.connect("A", "B", -3)
        assert graph.has_negative_weights()
        assert [edge.weight for edge in graph.edges] == [-3, -3]

    def test_entry_is_first_created(self):
        graph = Graph()
        assert graph.entry is None
        graph.connect("C", "A", 1)
        assert graph.entry.id == "C"
        assert [node.id for node in graph.nodes()] == ["A", "C"]

    def test_frozen_graph_rejects_edges(self, triangle):
        triangle.freeze()
        with pytest.raises(RuntimeError):
            triangle.connect("A", "D", 1)
