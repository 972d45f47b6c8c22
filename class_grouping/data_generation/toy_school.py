# class_grouping/data_generation/toy_school.py
from __future__ import annotations

import random
from typing import List

from ..config import (
    CLASSES_PER_STUDENT_DEFAULT,
    CROSS_COHORT_PROB_DEFAULT,
    DEFAULT_SEED,
    NUM_COHORTS_DEFAULT,
    NUM_STUDENTS_DEFAULT,
    NUM_TEACHERS_DEFAULT,
)
from ..models import Pairing


def _split_into_cohorts(teacher_ids: List[str], num_cohorts: int) -> List[List[str]]:
    """Round-robin the teachers over `num_cohorts` cohorts (none left empty)."""
    cohorts: List[List[str]] = [[] for _ in range(num_cohorts)]
    for i, t in enumerate(teacher_ids):
        cohorts[i % num_cohorts].append(t)
    return cohorts


def make_toy_school(
    num_teachers: int = NUM_TEACHERS_DEFAULT,
    num_students: int = NUM_STUDENTS_DEFAULT,
    classes_per_student: int = CLASSES_PER_STUDENT_DEFAULT,
    num_cohorts: int = NUM_COHORTS_DEFAULT,
    cross_cohort_prob: float = CROSS_COHORT_PROB_DEFAULT,
    seed: int = DEFAULT_SEED,
) -> List[Pairing]:
    """
    Return (teacher, student) pairs for a toy school.

    Teachers are split into cohorts (think year levels). Each student
    belongs to one cohort and takes `classes_per_student` classes, each
    taught by a teacher of their own cohort, or, with probability
    `cross_cohort_prob`, by any teacher.
    """
    if num_teachers < 1 or num_students < 1:
        raise ValueError(
            f"Need at least one teacher and one student "
            f"(got num_teachers={num_teachers}, num_students={num_students})."
        )
    if classes_per_student < 1:
        raise ValueError(f"classes_per_student must be >= 1, got {classes_per_student}.")
    if not (0.0 <= cross_cohort_prob <= 1.0):
        raise ValueError(f"cross_cohort_prob must be in [0, 1], got {cross_cohort_prob}.")

    rng = random.Random(seed)

    num_cohorts = max(1, min(num_cohorts, num_teachers))
    teacher_ids = [f"T{i:03d}" for i in range(1, num_teachers + 1)]
    cohorts = _split_into_cohorts(teacher_ids, num_cohorts)

    pairs: List[Pairing] = []
    for s_idx in range(1, num_students + 1):
        sid = f"S{s_idx:03d}"
        home = cohorts[rng.randrange(num_cohorts)]

        chosen: List[str] = []
        # A student cannot take more distinct classes than there are teachers
        wanted = min(classes_per_student, num_teachers)
        while len(chosen) < wanted:
            pool = teacher_ids if rng.random() < cross_cohort_prob else home
            remaining = [t for t in pool if t not in chosen]
            if not remaining:
                remaining = [t for t in teacher_ids if t not in chosen]
            chosen.append(rng.choice(remaining))

        pairs.extend((t, sid) for t in chosen)

    return pairs
