# class_grouping/grouping/student_assignment.py
from __future__ import annotations

import random
from typing import List, Sequence

from .state import GroupingState


def shuffled_students(students: Sequence[str], rng: random.Random) -> List[str]:
    order = sorted(students)
    rng.shuffle(order)
    return order


def assign_students(
    state: GroupingState,
    students: Sequence[str],
    rng: random.Random,
) -> List[str]:
    """
    Place every student in the cluster holding most of their teachers
    (ties broken at random). Students are visited in shuffled order.

    Returns the visiting order so the coverage repair can reuse it.
    """
    order = shuffled_students(students, rng)
    if not state.clusters:
        return order

    for student in order:
        overlaps = [state.student_overlap(student, idx) for idx in range(len(state.clusters))]
        best = max(overlaps)
        candidates = [idx for idx, ov in enumerate(overlaps) if ov == best]
        state.add_student(student, rng.choice(candidates))

    return order
