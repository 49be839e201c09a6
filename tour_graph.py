import itertools
import logging
from typing import Dict, Hashable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Edge ids are diagnostic only and shared by every graph in the process.
_edge_ids = itertools.count(1)


# =========================
# Nodes and edges
# =========================

class Node:
    """
    A node of the graph, stored in the registry arena.

    `edges` holds arena indices of the outgoing edges in arrival order.
    `next` is the arena index of the node that follows this one in
    ascending id order, or None for the last node.
    """
    __slots__ = ("index", "id", "edges", "next")

    def __init__(self, index: int, node_id: Hashable):
        self.index = index
        self.id = node_id
        self.edges: List[int] = []
        self.next: Optional[int] = None

    def __repr__(self):
        return f"Node({self.id!r}, edges={len(self.edges)})"


class Edge:
    """
    One direction of an undirected connection.

    `source` and `endpoint` are node arena indices, `reverse` is the arena
    index of the twin edge going the other way.
    """
    __slots__ = ("index", "id", "weight", "source", "endpoint", "reverse")

    def __init__(self, index: int, edge_id: int, weight: int, source: int, endpoint: int):
        self.index = index
        self.id = edge_id
        self.weight = weight
        self.source = source
        self.endpoint = endpoint
        self.reverse: Optional[int] = None

    def __repr__(self):
        return f"Edge({self.id}, {self.source}->{self.endpoint}, weight={self.weight})"


# =========================
# Node registry
# =========================

class NodeRegistry:
    """
    Nodes keyed by id, kept in a chain sorted by ascending id.

    The first node ever created is the entry node and never changes.
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.head: Optional[int] = None
        self.entry: Optional[int] = None
        self._by_id: Dict[Hashable, int] = {}

    def __len__(self):
        return len(self.nodes)

    def __contains__(self, node_id):
        return node_id in self._by_id

    def __iter__(self) -> Iterator[Node]:
        """Walk the chain in ascending id order."""
        index = self.head
        while index is not None:
            node = self.nodes[index]
            yield node
            index = node.next

    def get(self, node_id: Hashable) -> Node:
        return self.nodes[self._by_id[node_id]]

    def get_or_create(self, node_id: Hashable) -> Node:
        if node_id in self._by_id:
            logger.debug("Node %s already in node list", node_id)
            return self.nodes[self._by_id[node_id]]

        node = Node(len(self.nodes), node_id)
        self.nodes.append(node)
        self._by_id[node_id] = node.index
        logger.debug("Creating new node %s. Now have %d nodes", node_id, len(self.nodes))

        if self.entry is None:
            logger.debug("Adding %s as entry point", node_id)
            self.entry = node.index
            self.head = node.index
            return node

        # linear scan from the head for the insertion point
        if node_id < self.nodes[self.head].id:
            node.next = self.head
            self.head = node.index
            return node
        prev = self.nodes[self.head]
        while prev.next is not None and self.nodes[prev.next].id < node_id:
            prev = self.nodes[prev.next]
        node.next = prev.next
        prev.next = node.index
        return node


# =========================
# Graph
# =========================

class Graph:
    """
    Weighted undirected graph stored as pairs of directed edges.

    Nodes and edges live in two arenas and refer to each other by index.
    The graph only grows; once frozen (a search has started) it is read-only.
    """

    def __init__(self):
        self.registry = NodeRegistry()
        self.edges: List[Edge] = []
        self.frozen = False

    def __len__(self):
        return len(self.registry)

    def __contains__(self, node_id):
        return node_id in self.registry

    @property
    def entry(self) -> Optional[Node]:
        if self.registry.entry is None:
            return None
        return self.registry.nodes[self.registry.entry]

    def node(self, node_id: Hashable) -> Node:
        return self.registry.get(node_id)

    def nodes(self) -> List[Node]:
        """All nodes in ascending id order."""
        return list(self.registry)

    def out_edges(self, node: Node) -> List[Edge]:
        return [self.edges[index] for index in node.edges]

    def has_negative_weights(self) -> bool:
        return any(edge.weight < 0 for edge in self.edges)

    def freeze(self):
        self.frozen = True

    def _add_edge(self, source: Node, endpoint: Node, weight: int) -> Edge:
        edge = Edge(len(self.edges), next(_edge_ids), weight, source.index, endpoint.index)
        self.edges.append(edge)
        source.edges.append(edge.index)
        return edge

    def connect(self, id_a: Hashable, id_b: Hashable, weight: int) -> Tuple[Edge, Edge]:
        """
        Connect two nodes, creating them if needed.

        Adds an a->b edge and a b->a edge of the same weight. Self-loops and
        parallel edges are kept; the weight is not validated.
        """
        if self.frozen:
            raise RuntimeError("Graph is read-only once a search has started.")
        node_a = self.registry.get_or_create(id_a)
        node_b = self.registry.get_or_create(id_b)

        forward = self._add_edge(node_a, node_b, weight)
        backward = self._add_edge(node_b, node_a, weight)
        forward.reverse = backward.index
        backward.reverse = forward.index
        logger.debug("Added edges %d and %d: %s <-%d-> %s",
                     forward.id, backward.id, id_a, weight, id_b)
        return forward, backward
