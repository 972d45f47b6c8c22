# class_grouping/grouping/engine.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config import DEFAULT_SEARCH_ATTEMPTS, DEFAULT_TEACHERS_PER_GROUP
from ..graph import RelationGraph
from ..models import Group, GroupingParams, Pairing
from .diagnostics import analyze_groupings
from .repair import ensure_teachers_have_students, improve_student_coverage
from .state import GroupingState
from .student_assignment import assign_students
from .teacher_clusters import cluster_teachers


def _resolve_rng(rng: Optional[random.Random], seed: Optional[int]) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


def build_state(
    graph: RelationGraph,
    teachers_per_group: int = DEFAULT_TEACHERS_PER_GROUP,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    teachers: Optional[Sequence[str]] = None,
    students: Optional[Sequence[str]] = None,
    verbose: bool = False,
) -> Optional[GroupingState]:
    """
    Run clustering, assignment and both repair passes and return the working
    state (None when either population is empty).
    """
    rng = _resolve_rng(rng, seed)
    teachers = list(graph.teachers if teachers is None else teachers)
    students = list(graph.students if students is None else students)

    if not teachers or not students:
        return None

    # Sorted so the seeded run never depends on input order
    teachers = sorted(set(teachers))
    students = sorted(set(students))

    params = GroupingParams.from_counts(len(teachers), teachers_per_group)

    # 1) teacher clusters
    teacher_clusters = cluster_teachers(graph, teachers, teachers_per_group, rng, verbose=verbose)
    state = GroupingState(graph, teacher_clusters, params)

    # 2) students
    order = assign_students(state, students, rng)

    # 3) repair
    actions_a = ensure_teachers_have_students(state, rng, verbose=verbose)
    actions_b, steps = improve_student_coverage(state, order, verbose=verbose)

    if verbose:
        print(
            f"[GROUPING] {len(state.clusters)} group(s), hard cap {params.hard_max}, "
            f"{len(actions_a)} phase-A move(s), {len(actions_b)} phase-B move(s)"
        )

    state.repair_actions = actions_a + actions_b
    state.coverage_steps = steps
    return state


def create_groupings(
    graph: RelationGraph,
    teachers_per_group: int = DEFAULT_TEACHERS_PER_GROUP,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    teachers: Optional[Sequence[str]] = None,
    students: Optional[Sequence[str]] = None,
    verbose: bool = False,
) -> List[Group]:
    """
    Split teachers and students into groups. Each group lists its teachers
    followed by its students. Returns [] if there are no teachers or no
    students.

    Pass `rng` (or `seed`) to make the run reproducible.
    """
    state = build_state(
        graph,
        teachers_per_group,
        rng=rng,
        seed=seed,
        teachers=teachers,
        students=students,
        verbose=verbose,
    )
    if state is None:
        return []
    return state.to_groups()


def group_pairs(
    pairs: Iterable[Pairing],
    teachers_per_group: int = DEFAULT_TEACHERS_PER_GROUP,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> List[Group]:
    return create_groupings(
        RelationGraph.from_pairs(pairs),
        teachers_per_group,
        rng=rng,
        seed=seed,
        verbose=verbose,
    )


# ======================================================================
#  Multi-attempt search
# ======================================================================

@dataclass
class SearchResult:
    groups: List[Group]
    report: Dict[str, Any]
    attempt: int          # 1-based attempt that produced `groups`
    attempts_run: int


def search_groupings(
    graph: RelationGraph,
    teachers_per_group: int = DEFAULT_TEACHERS_PER_GROUP,
    attempts: int = DEFAULT_SEARCH_ATTEMPTS,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    teachers: Optional[Sequence[str]] = None,
    students: Optional[Sequence[str]] = None,
    verbose: bool = False,
) -> SearchResult:
    """
    Run the randomized grouping up to `attempts` times and keep the result
    with the lowest diagnostics score. Stops as soon as one passes every
    check.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}.")

    rng = _resolve_rng(rng, seed)

    best: Optional[SearchResult] = None

    for attempt in range(1, attempts + 1):
        groups = create_groupings(
            graph,
            teachers_per_group,
            rng=rng,
            teachers=teachers,
            students=students,
        )
        report = analyze_groupings(
            graph, groups, teachers_per_group, teachers=teachers, students=students
        )

        if verbose:
            print(f"[SEARCH] Attempt {attempt}: score={report['score']}")

        if best is None or report["score"] < best.report["score"]:
            best = SearchResult(groups, report, attempt, attempt)

        best.attempts_run = attempt
        if report["ok"]:
            break

    if verbose:
        print(f"[SEARCH] Keeping attempt {best.attempt} of {best.attempts_run}")
    return best
