import logging
import math
import re

import matplotlib.pyplot as plt
import networkx as nx

from errors import GraphFileError
from tour_graph import Graph
from utils import read_file

logger = logging.getLogger(__name__)

# <id>;<weight>;<id> with single character ids
EDGE_LINE = re.compile(r'^(.);([+-]?\d+);(.)$')


# =========================
# Edge-list input
# =========================

def parse_edge_list(text):
    """
    Parse edge-list text into (id_a, weight, id_b) triples.
    Lines that are not exactly such a triple are comments and are skipped.
    """
    triples = []
    for line in text.splitlines():
        match = EDGE_LINE.match(line)
        if match is None:
            if line:
                logger.debug("Skipping comment line %r", line)
            continue
        id_a, weight, id_b = match.groups()
        triples.append((id_a, int(weight), id_b))
    return triples


def graph_from_edge_list(edge_list):
    """
    Create a graph from a weighted edge list.
    The first id of the first triple becomes the entry node.
    """
    graph = Graph()
    for id_a, weight, id_b in edge_list:
        logger.debug("Pr Add: %s -> %d -> %s", id_a, weight, id_b)
        graph.connect(id_a, id_b, weight)
    return graph


def input_file_to_graph(file):
    """
    Build the graph described by an edge-list file.

    Parameters:
        file (str): Path of the input file.

    Returns:
        Graph: The graph, possibly empty if the file holds no data line.

    Raises:
        GraphFileError: if the file cannot be read.
    """
    logger.info("Trying to read file %s", file)
    try:
        text = read_file(file)
    except OSError as e:
        raise GraphFileError(file, e.errno, e.strerror or str(e)) from e
    return graph_from_edge_list(parse_edge_list(text))


# =========================
# networkx view
# =========================

def to_networkx(graph: Graph):
    """
    Every stored directed edge becomes one multigraph edge keyed by its edge id.
    The entry node id is kept in G.graph['entry'].
    """
    G = nx.MultiDiGraph()
    G.graph['entry'] = graph.entry.id if graph.entry is not None else None
    for node in graph.nodes():
        G.add_node(node.id)
    nodes = graph.registry.nodes
    for edge in graph.edges:
        G.add_edge(nodes[edge.source].id, nodes[edge.endpoint].id, key=edge.id, weight=edge.weight)
    return G


def _cheapest_undirected(G):
    simple = nx.Graph()
    simple.add_nodes_from(G.nodes())
    for u, v, weight in G.edges(data='weight'):
        if not simple.has_edge(u, v) or weight < simple[u][v]['weight']:
            simple.add_edge(u, v, weight=weight)
    return simple


def is_connected(graph: Graph):
    """
    Check whether the graph is connected, ignoring edge direction.
    An empty graph is not connected.
    """
    if len(graph) == 0:
        return False
    return nx.is_connected(_cheapest_undirected(to_networkx(graph)))


def analyze_tour(graph: Graph, tour):
    """
    Check a tour independently of the search.

    A tour is legitimate if:
    - it begins and ends at the entry node,
    - it visits every other node exactly once,
    - every step follows an existing edge.

    Returns:
        is_legitimate (bool), cost (the sum of the cheapest edge of every
        step, or positive infinity for an illegitimate tour)
    """
    G = to_networkx(graph)
    entry = G.graph['entry']
    if not tour or len(tour) < 2 or tour[0] != entry or tour[-1] != entry:
        logger.info("Tour does not start and end at %s", entry)
        return False, math.inf
    others = sorted(node for node in G.nodes() if node != entry)
    if sorted(tour[1:-1]) != others:
        logger.info("Tour does not visit every node exactly once")
        return False, math.inf

    cost = 0
    for i in range(1, len(tour)):
        if not G.has_edge(tour[i - 1], tour[i]):
            logger.info("Edge %s not in graph", (tour[i - 1], tour[i]))
            return False, math.inf
        cost += min(data['weight'] for data in G.get_edge_data(tour[i - 1], tour[i]).values())
    return True, cost


# =========================
# Reporting
# =========================

def format_tour(result, entry=None):
    """'A B C A: 6' for a found tour, a plain message otherwise."""
    if not result.found:
        if entry is None:
            return "Graph is unsolvable: no tour found"
        return f"Graph is unsolvable: no tour returns to {entry}"
    return ' '.join(str(node_id) for node_id in result.tour) + f": {result.cost}"


def list_edges(graph: Graph, node_id):
    node = graph.node(node_id)
    nodes = graph.registry.nodes
    parts = [f"{nodes[edge.endpoint].id}-{edge.weight}" for edge in graph.out_edges(node)]
    return f"Node {node.id}:" + ''.join(' ' + part for part in parts)


def draw_graph(graph: Graph, tour=None, with_weight=True, show=False, seed=None):
    """Draw the graph, highlighting the tour edges if a tour is given"""
    G = _cheapest_undirected(to_networkx(graph))
    fig, ax = plt.subplots()
    pos = nx.spring_layout(G, seed=seed)  # positions for all nodes
    nx.draw(G, pos, ax=ax, with_labels=True, node_color='skyblue', node_size=2000, font_size=10)

    if tour:
        tour_edges = [(tour[i - 1], tour[i]) for i in range(1, len(tour)) if tour[i - 1] != tour[i]]
        nx.draw_networkx_edges(G, pos, ax=ax, edgelist=tour_edges, edge_color='red', width=2)

    if with_weight:
        # Draw edge labels
        edge_labels = nx.get_edge_attributes(G, 'weight')
        nx.draw_networkx_edge_labels(G, pos, ax=ax, edge_labels=edge_labels)

    if show:
        plt.show()
    return ax
