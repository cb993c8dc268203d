import random

import networkx as nx
import pytest

from rltlbo.dag import Task, Worker


def make_tasks(sizes, parents=None):
    parents = parents or {}
    return [
        Task(f"T{index}", float(size), frozenset(parents.get(f"T{index}", ())))
        for index, size in enumerate(sizes)
    ]


def make_workers(rates):
    return [Worker(f"W{index}", float(rate)) for index, rate in enumerate(rates)]


def random_dag_tasks(num_tasks: int, seed: int, edge_prob: float = 0.2):
    """Random DAG; edges only run from lower to higher index."""
    rng = random.Random(seed)
    graph = nx.gnp_random_graph(num_tasks, edge_prob, seed=seed, directed=True)
    parents = {}
    for src, dst in graph.edges():
        if src < dst:
            parents.setdefault(f"T{dst}", []).append(f"T{src}")
    sizes = [rng.uniform(1, 100) for _ in range(num_tasks)]
    return make_tasks(sizes, parents)


@pytest.fixture
def diamond():
    # T0 -> (T1, T2) -> T3
    return make_tasks(
        [4, 6, 2, 8],
        {"T1": ["T0"], "T2": ["T0"], "T3": ["T1", "T2"]},
    )


@pytest.fixture
def workers():
    return make_workers([1, 2, 4])
