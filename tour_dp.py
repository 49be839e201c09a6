import math

from tour_graph import Graph
from tour_utils import to_networkx


def tour_dp(graph: Graph):
    """
    Solve the tour problem exactly with the Held-Karp DP.

    Only existing edges are used (the cheapest one when several join the same
    pair); missing edges are never replaced by shortest paths, and negative
    weights are fine.

    Returns:
      - (cost, tour): tour is [entry, ..., entry] visiting every node once,
        or (inf, []) if the graph has no such tour
    """
    G = to_networkx(graph)
    entry = G.graph["entry"]
    if entry is None:
        raise ValueError("Graph must contain an entry node.")

    # cheapest edge for every ordered pair
    dist = {}
    for u, v, weight in G.edges(data="weight"):
        if weight < dist.get((u, v), math.inf):
            dist[(u, v)] = weight

    nodes = sorted(G.nodes())
    if len(nodes) == 1:
        if (entry, entry) in dist:
            return dist[(entry, entry)], [entry, entry]
        return math.inf, []

    other_nodes = [node for node in nodes if node != entry]
    n = len(other_nodes)
    full_mask = (1 << n) - 1

    dp = {}      # dp[(mask, last_idx)] = min cost
    parent = {}  # parent[(mask, last_idx)] = (prev_mask, prev_idx)

    # init: leave the entry node for one other node
    for idx, node in enumerate(other_nodes):
        if (entry, node) not in dist:
            continue
        mask = 1 << idx
        dp[(mask, idx)] = dist[(entry, node)]
        parent[(mask, idx)] = (0, -1)

    # transitions, masks in increasing order so every subset is final before use
    for mask in range(1, full_mask + 1):
        for last_idx in range(n):
            key = (mask, last_idx)
            if key not in dp:
                continue
            cur_cost = dp[key]
            last_node = other_nodes[last_idx]

            for nxt in range(n):
                if mask & (1 << nxt):
                    continue
                step = dist.get((last_node, other_nodes[nxt]))
                if step is None:
                    continue
                nxt_mask = mask | (1 << nxt)
                new_cost = cur_cost + step
                dp_key = (nxt_mask, nxt)
                if new_cost < dp.get(dp_key, math.inf):
                    dp[dp_key] = new_cost
                    parent[dp_key] = (mask, last_idx)

    # close the tour back to the entry node
    best_cost = math.inf
    best_last = None
    for idx in range(n):
        key = (full_mask, idx)
        closing = dist.get((other_nodes[idx], entry))
        if key not in dp or closing is None:
            continue
        cost = dp[key] + closing
        if cost < best_cost:
            best_cost = cost
            best_last = idx

    if best_last is None:
        return math.inf, []

    # reconstruct order
    mask = full_mask
    idx = best_last
    order = []
    while mask:
        order.append(other_nodes[idx])
        mask, idx = parent[(mask, idx)]
    order.reverse()

    return best_cost, [entry] + order + [entry]
