# class_grouping/graph.py
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Union

from .models import Pairing


class RelationGraph:
    """
    Bipartite "teacher instructs student" relation.

    Two mappings are kept, each the exact transpose of the other:
      teacher_to_students[t] = {s, ...}
      student_to_teachers[s] = {t, ...}

    Immutable by convention: nothing in the package mutates a graph after
    `from_pairs` returns it. Use `without(...)` to derive a smaller one.
    """

    def __init__(
        self,
        teacher_to_students: Dict[str, Set[str]],
        student_to_teachers: Dict[str, Set[str]],
    ) -> None:
        self._teacher_to_students = teacher_to_students
        self._student_to_teachers = student_to_teachers

    @classmethod
    def from_pairs(cls, pairs: Iterable[Pairing]) -> RelationGraph:
        teacher_to_students: Dict[str, Set[str]] = {}
        student_to_teachers: Dict[str, Set[str]] = {}

        for teacher, student in pairs:
            teacher_to_students.setdefault(teacher, set()).add(student)
            student_to_teachers.setdefault(student, set()).add(teacher)

        return cls(teacher_to_students, student_to_teachers)

    # ---------- populations ----------

    @property
    def teachers(self) -> List[str]:
        return list(self._teacher_to_students)

    @property
    def students(self) -> List[str]:
        return list(self._student_to_teachers)

    @property
    def num_teachers(self) -> int:
        return len(self._teacher_to_students)

    @property
    def num_students(self) -> int:
        return len(self._student_to_teachers)

    def is_teacher(self, identifier: str) -> bool:
        return identifier in self._teacher_to_students

    def is_student(self, identifier: str) -> bool:
        return identifier in self._student_to_teachers

    def has_pair(self, teacher: str, student: str) -> bool:
        return student in self._teacher_to_students.get(teacher, ())

    def pairs(self) -> Iterator[Pairing]:
        for teacher, students in self._teacher_to_students.items():
            for student in students:
                yield teacher, student

    # ---------- neighbour lookups ----------

    def students_of(self, teacher: str) -> FrozenSet[str]:
        return frozenset(self._teacher_to_students.get(teacher, ()))

    def teachers_of(self, student: str) -> FrozenSet[str]:
        return frozenset(self._student_to_teachers.get(student, ()))

    def neighbor_teachers(self, teacher: str) -> Set[str]:
        """Teachers (other than `teacher`) sharing at least one student with it."""
        neighbours: Set[str] = set()
        for student in self._teacher_to_students.get(teacher, ()):
            neighbours.update(self._student_to_teachers[student])
        neighbours.discard(teacher)
        return neighbours

    # ---------- overlap primitives ----------

    def overlap_count(self, teacher: str, other: Union[str, Iterable[str]]) -> int:
        """
        Shared-student count.

        - overlap_count(a, b): |students(a) ∩ students(b)|
        - overlap_count(a, group): sum of overlap_count(a, m) over every
          member m of `group` other than `a` itself
        """
        mine = self._teacher_to_students.get(teacher, set())
        if isinstance(other, str):
            return len(mine & self._teacher_to_students.get(other, set()))

        total = 0
        for member in other:
            if member == teacher:
                continue
            total += len(mine & self._teacher_to_students.get(member, set()))
        return total

    def student_overlap(self, student: str, teachers: Iterable[str]) -> int:
        """How many of the student's teachers are in `teachers`."""
        mine = self._student_to_teachers.get(student, set())
        pool = teachers if isinstance(teachers, (set, frozenset)) else set(teachers)
        return len(mine & pool)

    # ---------- derived graphs ----------

    def without(
        self,
        teachers: Optional[Iterable[str]] = None,
        students: Optional[Iterable[str]] = None,
    ) -> RelationGraph:
        """
        New graph with the given teachers and/or students removed from both
        sides. Entities left without any pair drop out of the result.
        """
        drop_teachers = set(teachers or ())
        drop_students = set(students or ())

        return RelationGraph.from_pairs(
            (t, s)
            for t, s in self.pairs()
            if t not in drop_teachers and s not in drop_students
        )

    def __repr__(self) -> str:
        return (
            f"RelationGraph(teachers={self.num_teachers}, "
            f"students={self.num_students})"
        )

