import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import List, Optional

from errors import EmptyGraphError
from tour_graph import Graph

logger = logging.getLogger(__name__)


class TieBreak(Enum):
    LAST = "last"    # the later-examined equal-cost branch wins
    FIRST = "first"  # the first minimal branch found wins


# =========================
# Result holders
# =========================

class SolutionBuffer:
    """
    Best tour found so far, by depth: slot i holds the node visited at
    depth i, slot N the entry node that closes the tour.
    Empty until the first complete tour is recorded.
    """
    __slots__ = ("slots",)

    def __init__(self, size: int):
        self.slots: List[Optional[int]] = [None] * size

    def __bool__(self):
        return self.slots[0] is not None

    def record(self, depth: int, node_index: int):
        self.slots[depth] = node_index

    def record_tour(self, path: List[int], closing: int):
        """Overwrite every slot with a complete path and its closing node."""
        for depth, node_index in enumerate(path):
            self.record(depth, node_index)
        self.record(len(path), closing)

    def ids(self, graph: Graph) -> list:
        if not self:
            return []
        return [graph.registry.nodes[index].id for index in self.slots]


class TourResult:
    __slots__ = ("found", "cost", "tour", "completions", "visits")

    def __init__(self, found, cost, tour, completions, visits):
        self.found = bool(found)
        self.cost = cost                # None when no tour exists
        self.tour = tour                # node ids, entry first and last
        self.completions = int(completions)  # closing steps reached
        self.visits = int(visits)       # admission decisions made

    def __repr__(self):
        if not self.found:
            return "TourResult(unsolvable)"
        return f"TourResult({' '.join(map(str, self.tour))}: {self.cost})"


# =========================
# Search
# =========================

class SearchContext:
    """
    State of one top-level search. Build a fresh one per search: the best
    cost and the recorded tour must never leak from one search into another.

    Completions are met in depth-first edge order, so keeping the last
    (or first) cheapest completion is the same as resolving ties to the
    last (or first) edge at every level.
    """

    def __init__(self, graph: Graph, tie_break: TieBreak = TieBreak.LAST, prune: bool = False):
        self.graph = graph
        self.entry = graph.registry.entry
        self.node_count = len(graph)
        self.tie_break = tie_break
        self.prune = prune
        self.best_cost: Optional[int] = None
        self.solution = SolutionBuffer(self.node_count + 1)
        self.completions = 0
        self.visits = 0

    def better(self, cost: int, best: Optional[int]) -> bool:
        if best is None or cost < best:
            return True
        return cost == best and self.tie_break is TieBreak.LAST

    def admit(self, path: List[int], visited: set, node_index: int) -> bool:
        """
        Decide whether node_index may extend path.

        Once every node is on the path only the entry node is admitted,
        which closes the tour. Before that, nodes already on the path are refused.
        """
        self.visits += 1
        if len(path) == self.node_count:
            return node_index == self.entry
        return node_index not in visited

    def search(self, path: List[int], visited: set, cost: int, node_index: int) -> Optional[int]:
        """
        Cheapest completion cost of the tour from node_index, given the path
        so far and its cost. Returns None if no completion exists.
        """
        if not self.admit(path, visited, node_index):
            return None
        if len(path) == self.node_count:
            self.completions += 1
            if self.better(cost, self.best_cost):
                self.best_cost = cost
                self.solution.record_tour(path, node_index)
            return cost

        path.append(node_index)
        visited.add(node_index)
        try:
            best = None
            node = self.graph.registry.nodes[node_index]
            for edge in self.graph.out_edges(node):
                child_cost = cost + edge.weight
                if self.prune and self.best_cost is not None and child_cost > self.best_cost:
                    continue
                found = self.search(path, visited, child_cost, edge.endpoint)
                if found is not None and (best is None or found < best):
                    best = found
        finally:
            path.pop()
            visited.discard(node_index)
        return best


def _search_branch(graph, tie_break, prune, edge):
    """Explore one edge out of the entry node with its own path and context."""
    context = SearchContext(graph, tie_break, prune)
    entry = context.entry
    found = context.search([entry], {entry}, edge.weight, edge.endpoint)
    return found, context


def _search_parallel(graph, context, workers):
    entry = context.entry
    # admission of the entry node itself
    context.visits += 1
    edges = graph.out_edges(graph.registry.nodes[entry])
    with ThreadPoolExecutor(max_workers=workers) as executor:
        branches = [executor.submit(_search_branch, graph, context.tie_break, context.prune, edge)
                    for edge in edges]
        outcomes = [branch.result() for branch in branches]

    # merged in edge order so ties resolve as in the sequential search
    for found, branch in outcomes:
        context.completions += branch.completions
        context.visits += branch.visits
        if found is not None and context.better(found, context.best_cost):
            context.best_cost = found
            context.solution = branch.solution
    return context.best_cost


def find_min_tour(graph: Graph, tie_break=TieBreak.LAST, prune: bool = False, workers: int = 1) -> TourResult:
    """
    Minimum-cost tour that starts at the entry node, visits every other node
    exactly once and returns to the entry node.

    Parameters:
        graph (Graph): The graph to search. It is frozen for the rest of its life.
        tie_break (TieBreak or str): Which of two equal-cost branches is kept.
        prune (bool): Skip partial paths already costlier than the best tour.
            Ignored when the graph has negative weights.
        workers (int): Explore the entry node's edges on this many threads.

    Returns:
        TourResult: found is False when no tour returns to the entry node.
    """
    if len(graph) == 0:
        raise EmptyGraphError("No nodes in graph")
    tie_break = TieBreak(tie_break)
    if workers < 1:
        raise ValueError("workers must be at least 1.")
    if prune and graph.has_negative_weights():
        logger.debug("Negative edge weights present, branch-and-bound disabled")
        prune = False

    graph.freeze()
    context = SearchContext(graph, tie_break, prune)
    logger.info("Searching tours over %d nodes from %s", context.node_count, graph.entry.id)

    if workers > 1:
        cost = _search_parallel(graph, context, workers)
    else:
        cost = context.search([], set(), 0, context.entry)

    logger.info("Search done: %d complete tours, %d visits", context.completions, context.visits)
    if cost is None:
        return TourResult(False, None, [], context.completions, context.visits)
    return TourResult(True, cost, context.solution.ids(graph), context.completions, context.visits)
