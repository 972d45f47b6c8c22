# class_grouping/grouping/repair.py
from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from ..config import TARGET_STUDENT_OVERLAP
from ..models import CoverageStep, RepairAction
from .state import GroupingState


# ======================================================================
#  Phase A: every teacher should see at least one of their own students
# ======================================================================

def _fix_teacher(
    state: GroupingState,
    teacher: str,
    rng: random.Random,
    verbose: bool,
) -> Optional[RepairAction]:
    current = state.teacher_to_cluster[teacher]
    if state.own_students_in(teacher, current):
        return None

    own_students = sorted(state.graph.students_of(teacher))

    # Option 1: pull one of the teacher's students in, but only from a
    # cluster that keeps at least one student afterwards.
    movable_students: List[str] = []
    for s in own_students:
        idx = state.student_to_cluster.get(s)
        if idx is None or idx == current:
            continue
        if len(state.clusters[idx].students) > 1:
            movable_students.append(s)

    if movable_students:
        chosen = rng.choice(movable_students)
        source = state.move_student(chosen, current)
        if verbose:
            print(f"[REPAIR-A] Moved student {chosen} from group {source} to {current} for {teacher}")
        return RepairAction("A", "move_student", chosen, source, current, reason=teacher)

    # Option 2: move the teacher to where their students are.
    # One entry per student, so clusters with more of them are likelier.
    targets: List[int] = []
    if len(state.clusters[current].teachers) > 1:
        for s in own_students:
            idx = state.student_to_cluster.get(s)
            if idx is None or idx == current:
                continue
            if state.has_room(idx):
                targets.append(idx)

    if targets:
        target = rng.choice(targets)
        state.move_teacher(teacher, target)
        if verbose:
            print(f"[REPAIR-A] Moved teacher {teacher} from group {current} to {target}")
        return RepairAction("A", "move_teacher", teacher, current, target)

    if verbose:
        print(f"[REPAIR-A] Accepting {teacher} without own students in group {current}")
    return None


def ensure_teachers_have_students(
    state: GroupingState,
    rng: random.Random,
    verbose: bool = False,
) -> List[RepairAction]:
    actions: List[RepairAction] = []
    for idx in range(len(state.clusters)):
        for teacher in sorted(state.clusters[idx].teachers):
            action = _fix_teacher(state, teacher, rng, verbose)
            if action is not None:
                actions.append(action)
    return actions


# ======================================================================
#  Phase B: raise students below the coverage target
# ======================================================================

def _donor_keeps_coverage(state: GroupingState, donor: int, leaving: str) -> bool:
    """True if some other teacher of `donor` still has an own student there."""
    for other in state.clusters[donor].teachers:
        if other == leaving:
            continue
        if state.own_students_in(other, donor):
            return True
    return False


def _donor_side_drops(state: GroupingState, teacher: str, donor: int, student: str) -> List[CoverageStep]:
    """Overlap losses the donor's students take when `teacher` leaves it."""
    drops: List[CoverageStep] = []
    for other in sorted(state.clusters[donor].students & state.graph.students_of(teacher)):
        ov = state.student_overlap(other, donor)
        drops.append(CoverageStep(other, ov, ov - 1, caused_by=student))
    return drops


def _pull_teachers(
    state: GroupingState,
    student: str,
    current: int,
    actions: List[RepairAction],
    steps: List[CoverageStep],
    verbose: bool,
) -> int:
    """Move the student's teachers into their cluster until the target is met."""
    overlap = state.student_overlap(student, current)

    for teacher in sorted(state.graph.teachers_of(student)):
        donor = state.teacher_to_cluster.get(teacher)
        if donor is None or donor == current:
            continue
        if len(state.clusters[donor].teachers) <= 1:
            continue
        if not state.has_room(current):
            continue
        if not _donor_keeps_coverage(state, donor, teacher):
            continue

        drops = _donor_side_drops(state, teacher, donor, student)
        state.move_teacher(teacher, current)
        actions.append(RepairAction("B", "move_teacher", teacher, donor, current, reason=student))
        steps.extend(drops)
        if verbose:
            print(f"[REPAIR-B] Pulled teacher {teacher} from group {donor} to {current} for {student}")
            for d in drops:
                print(f"[REPAIR-B]   {d.student} in group {donor} drops from {d.before} to {d.after}")

        overlap = state.student_overlap(student, current)
        if overlap >= TARGET_STUDENT_OVERLAP:
            break

    return overlap


def _best_other_cluster(state: GroupingState, student: str, current: int, overlap: int) -> Tuple[int, int]:
    best_idx, best_overlap = -1, overlap
    for idx in range(len(state.clusters)):
        if idx == current:
            continue
        ov = state.student_overlap(student, idx)
        if ov > best_overlap:
            best_idx, best_overlap = idx, ov
    return best_idx, best_overlap


def _leaving_is_safe(state: GroupingState, student: str, current: int) -> bool:
    """No teacher of `current` may be left without another own student there."""
    for teacher in state.clusters[current].teachers:
        if not state.own_students_in(teacher, current, exclude=student):
            return False
    return True


def improve_student_coverage(
    state: GroupingState,
    students: Sequence[str],
    verbose: bool = False,
) -> Tuple[List[RepairAction], List[CoverageStep]]:
    """
    For every student below the coverage target, first try pulling their
    teachers into their group, then try moving them to a group that
    already holds enough of their teachers.

    Returns the moves made and one `CoverageStep` per visited student. A
    pulled teacher can lower the overlap of students left behind in its old
    group; each such loss is recorded as an extra step with `caused_by` set
    to the student being repaired.
    """
    actions: List[RepairAction] = []
    steps: List[CoverageStep] = []

    for student in students:
        current = state.student_to_cluster.get(student)
        if current is None:
            continue

        before = state.student_overlap(student, current)
        if before >= TARGET_STUDENT_OVERLAP:
            continue

        overlap = _pull_teachers(state, student, current, actions, steps, verbose)
        if overlap >= TARGET_STUDENT_OVERLAP:
            steps.append(CoverageStep(student, before, overlap))
            continue

        if len(state.clusters[current].students) <= 1:
            steps.append(CoverageStep(student, before, overlap))
            continue

        best_idx, best_overlap = _best_other_cluster(state, student, current, overlap)
        if best_idx == -1 or best_overlap < TARGET_STUDENT_OVERLAP:
            steps.append(CoverageStep(student, before, overlap))
            continue

        if not _leaving_is_safe(state, student, current):
            steps.append(CoverageStep(student, before, overlap))
            continue

        state.move_student(student, best_idx)
        actions.append(RepairAction("B", "move_student", student, current, best_idx))
        if verbose:
            print(f"[REPAIR-B] Moved student {student} from group {current} to {best_idx}")
        steps.append(CoverageStep(student, before, best_overlap))

    return actions, steps
