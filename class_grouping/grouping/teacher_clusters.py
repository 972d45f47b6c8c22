# class_grouping/grouping/teacher_clusters.py
from __future__ import annotations

import random
from typing import Dict, List, Sequence, Set

from ..graph import RelationGraph
from ..models import GroupingParams


def _pick_max(scores: Dict[str, int], rng: random.Random) -> str:
    """Uniform random choice among the maximum-scoring keys."""
    best = max(scores.values())
    tied = sorted(k for k, v in scores.items() if v == best)
    return rng.choice(tied)


def _residual_degree(graph: RelationGraph, teacher: str, unassigned: Set[str]) -> int:
    return len(graph.neighbor_teachers(teacher) & unassigned)


def _grow_cluster(
    graph: RelationGraph,
    seed_teacher: str,
    unassigned: Set[str],
    hard_max: int,
    rng: random.Random,
) -> List[str]:
    """
    Grow a cluster from `seed_teacher` by repeatedly adding the unassigned
    neighbour with the largest total shared-student weight to the cluster.
    """
    cluster = [seed_teacher]
    unassigned.discard(seed_teacher)

    while len(cluster) < hard_max:
        frontier: Set[str] = set()
        for member in cluster:
            frontier |= graph.neighbor_teachers(member)
        frontier &= unassigned

        if not frontier:
            break

        scores = {cand: graph.overlap_count(cand, cluster) for cand in frontier}
        chosen = _pick_max(scores, rng)

        cluster.append(chosen)
        unassigned.discard(chosen)

    return cluster


def _merge_singletons(clusters: List[List[str]], hard_max: int, verbose: bool) -> List[List[str]]:
    """
    Attach every single-teacher cluster to the smallest multi-teacher cluster
    that still has room. A singleton with nowhere to go is kept as is.
    """
    merged = [c for c in clusters if len(c) > 1]
    singles = [c[0] for c in clusters if len(c) == 1]

    for teacher in singles:
        target_idx = -1
        smallest = None
        for i, c in enumerate(merged):
            if len(c) + 1 > hard_max:
                continue
            if smallest is None or len(c) < smallest:
                smallest = len(c)
                target_idx = i

        if target_idx == -1:
            if verbose:
                print(f"[CLUSTER] No room for {teacher}; keeping it as a single-teacher group.")
            merged.append([teacher])
        else:
            merged[target_idx].append(teacher)

    return merged


def cluster_teachers(
    graph: RelationGraph,
    teachers: Sequence[str],
    teachers_per_group: int,
    rng: random.Random,
    verbose: bool = False,
) -> List[Set[str]]:
    """
    Partition `teachers` into clusters of roughly `teachers_per_group`,
    never above the derived hard cap (except for last-resort singletons).

    Seeds are the unassigned teachers with the most unassigned neighbours;
    clusters grow greedily by shared-student weight. Ties are broken with
    `rng`.
    """
    if not teachers:
        return []

    params = GroupingParams.from_counts(len(teachers), teachers_per_group)
    unassigned: Set[str] = set(teachers)
    clusters: List[List[str]] = []

    while unassigned:
        degrees = {t: _residual_degree(graph, t, unassigned) for t in unassigned}
        seed_teacher = _pick_max(degrees, rng)
        cluster = _grow_cluster(graph, seed_teacher, unassigned, params.hard_max, rng)
        clusters.append(cluster)

        if verbose:
            print(
                f"[CLUSTER] Seed {seed_teacher} (degree {degrees[seed_teacher]}) "
                f"-> {len(cluster)} teacher(s)"
            )

    merged = _merge_singletons(clusters, params.hard_max, verbose)
    return [set(c) for c in merged]
