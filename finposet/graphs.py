from __future__ import annotations

from typing import Dict, List, Optional

import networkx as nx
import numpy as np


def random_order_dag(
    n: int,
    p: float,
    seed: Optional[int] = None,
) -> nx.DiGraph:
    """Random DAG on 0..n-1 whose edges all point from a smaller to a larger index.

    Each pair u < v gets an edge with probability p, so 0..n-1 is a linear
    extension of the order generated by the result.
    """
    rng = np.random.default_rng(seed)
    G = nx.DiGraph()
    G.add_nodes_from(range(n))
    for u in range(n):
        for v in range(u + 1, n):
            if rng.random() < p:
                G.add_edge(u, v)
    return G


def layered_order_dag(
    n_layers: int,
    layer_size: int,
    p_forward: float,
    p_skip: float = 0.0,
    seed: Optional[int] = None,
) -> nx.DiGraph:
    """Layered DAG for graded-looking random orders.

    Nodes are labeled by integer id = layer*layer_size + i.

    Edges:
    - forward:  ℓ -> ℓ+1 with prob p_forward
    - skip:     ℓ -> ℓ+2 with prob p_skip
    """
    rng = np.random.default_rng(seed)
    n = n_layers * layer_size
    G = nx.DiGraph()
    G.add_nodes_from(range(n))

    def nid(layer: int, i: int) -> int:
        return layer * layer_size + i

    for layer in range(n_layers):
        for i in range(layer_size):
            u = nid(layer, i)
            if layer + 1 < n_layers:
                for j in range(layer_size):
                    if rng.random() < p_forward:
                        G.add_edge(u, nid(layer + 1, j))
            if p_skip > 0 and layer + 2 < n_layers:
                for j in range(layer_size):
                    if rng.random() < p_skip:
                        G.add_edge(u, nid(layer + 2, j))
    return G


def longest_path_depth(dag: nx.DiGraph) -> Dict[int, int]:
    """Depth label = length of a longest directed path ending at node."""
    order = list(nx.topological_sort(dag))
    depth: Dict[int, int] = {v: 0 for v in dag.nodes()}
    for v in order:
        preds = list(dag.predecessors(v))
        depth[v] = 0 if not preds else 1 + max(depth[p] for p in preds)
    return depth


def random_topological_order(dag: nx.DiGraph, rng: np.random.Generator) -> List[int]:
    """Random linear extension of a DAG partial order (Kahn with random tie-break)."""
    indeg = {v: int(dag.in_degree(v)) for v in dag.nodes()}
    available = sorted(v for v, d in indeg.items() if d == 0)
    order: List[int] = []
    while available:
        i = int(rng.integers(0, len(available)))
        v = available.pop(i)
        order.append(v)
        for w in sorted(dag.successors(v)):
            indeg[w] -= 1
            if indeg[w] == 0:
                available.append(w)
    if len(order) != dag.number_of_nodes():
        raise ValueError("DAG topological order failed (graph has a cycle).")
    return order
