# class_grouping/grouping/diagnostics.py
from __future__ import annotations

from collections import Counter
from typing import Any, Collection, Dict, List, Optional, Sequence, Tuple

from ..config import TARGET_STUDENT_OVERLAP
from ..graph import RelationGraph
from ..models import Group, GroupingParams


def split_group(
    graph: RelationGraph,
    group: Group,
    teachers: Optional[Collection[str]] = None,
    students: Optional[Collection[str]] = None,
) -> Tuple[List[str], List[str]]:
    """
    Separate a flattened group back into (teachers, students).

    Explicit `students` (or, failing that, `teachers`) decide the side of
    each id; the graph is consulted only when neither is given.
    """
    if students is not None:
        pool = students if isinstance(students, (set, frozenset)) else set(students)
        in_students = [x in pool for x in group]
    elif teachers is not None:
        pool = teachers if isinstance(teachers, (set, frozenset)) else set(teachers)
        in_students = [x not in pool for x in group]
    else:
        in_students = [graph.is_student(x) for x in group]

    return (
        [x for x, flag in zip(group, in_students) if not flag],
        [x for x, flag in zip(group, in_students) if flag],
    )


def analyze_groupings(
    graph: RelationGraph,
    groups: Sequence[Group],
    teachers_per_group: int,
    teachers: Optional[Sequence[str]] = None,
    students: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """
    Check a finished grouping against the soft and hard rules.

    Returns a dict with:
      - 'ok': bool (every check below passed)
      - 'messages': list[str] (human-readable findings)
      - 'suggestion': str (summary)

      - 'num_groups': int
      - 'hard_max': int
      - 'teacher_counts': List[int]            (per group)
      - 'student_counts': List[int]            (per group)

      - 'missing': List[str]                   (input ids not in any group)
      - 'duplicated': List[str]                (ids in more than one group)
      - 'over_cap_groups': List[Tuple[int, int]]
      - 'singleton_groups': List[int]
      - 'teachers_without_students': List[Tuple[str, int]]
      - 'low_overlap_students': List[Tuple[str, int]]

      - 'score': tuple, lower is better
    """
    teachers = list(graph.teachers if teachers is None else teachers)
    students = list(graph.students if students is None else students)

    messages: List[str] = []
    params = GroupingParams.from_counts(len(teachers), teachers_per_group)

    # ---------- 1. Completeness ----------
    seen = Counter(x for g in groups for x in g)
    expected = set(teachers) | set(students)
    missing = sorted(expected - set(seen))
    duplicated = sorted(x for x, c in seen.items() if c > 1)

    if missing:
        messages.append(f"{len(missing)} teacher(s)/student(s) are not in any group: {missing[:5]}")
    if duplicated:
        messages.append(f"{len(duplicated)} id(s) appear in more than one group: {duplicated[:5]}")

    # ---------- 2. Per-group caps ----------
    student_set = set(students)
    split = [split_group(graph, g, students=student_set) for g in groups]
    teacher_counts = [len(ts) for ts, _ in split]
    student_counts = [len(ss) for _, ss in split]

    over_cap_groups = [
        (i, c) for i, c in enumerate(teacher_counts) if c > params.hard_max
    ]
    singleton_groups = [i for i, c in enumerate(teacher_counts) if c == 1]

    for i, c in over_cap_groups:
        messages.append(f"Group {i} has {c} teachers, above the cap of {params.hard_max}.")

    # ---------- 3. Teacher has own student ----------
    teachers_without_students: List[Tuple[str, int]] = []
    for i, (ts, ss) in enumerate(split):
        here = set(ss)
        for t in ts:
            if not (graph.students_of(t) & here):
                teachers_without_students.append((t, i))

    if teachers_without_students:
        messages.append(
            f"{len(teachers_without_students)} teacher(s) have none of their own "
            f"students in their group."
        )

    # ---------- 4. Student coverage ----------
    low_overlap_students: List[Tuple[str, int]] = []
    for ts, ss in split:
        group_teachers = set(ts)
        for s in ss:
            ov = graph.student_overlap(s, group_teachers)
            if ov < TARGET_STUDENT_OVERLAP:
                low_overlap_students.append((s, ov))

    if low_overlap_students:
        messages.append(
            f"{len(low_overlap_students)} student(s) share fewer than "
            f"{TARGET_STUDENT_OVERLAP} teachers with their group."
        )

    ok = len(messages) == 0

    if ok:
        suggestion = "Every student shares enough teachers with their group."
    else:
        suggestion = "Grouping is usable but not clean. "
        if missing or duplicated:
            suggestion += "Membership is inconsistent; do not use this result. "
        if low_overlap_students or teachers_without_students:
            suggestion += (
                "Consider re-running with another seed, more attempts, "
                "or a different teachers-per-group value."
            )

    score = (
        len(missing) + len(duplicated),
        len(over_cap_groups),
        len(teachers_without_students),
        len(low_overlap_students),
    )

    return {
        "ok": ok,
        "messages": messages,
        "suggestion": suggestion,
        "num_groups": len(groups),
        "hard_max": params.hard_max,
        "teacher_counts": teacher_counts,
        "student_counts": student_counts,
        "missing": missing,
        "duplicated": duplicated,
        "over_cap_groups": over_cap_groups,
        "singleton_groups": singleton_groups,
        "teachers_without_students": teachers_without_students,
        "low_overlap_students": low_overlap_students,
        "score": score,
    }
