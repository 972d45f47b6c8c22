# class_grouping/grouping/state.py
from __future__ import annotations

from typing import Dict, Iterable, List, Set

from ..graph import RelationGraph
from ..models import Cluster, CoverageStep, Group, GroupingParams, RepairAction


class GroupingState:
    """
    Working clusters plus the two reverse indices.

    Every membership change goes through `add_student`, `move_student` or
    `move_teacher`, which update the cluster sets and the index together.
    """

    def __init__(
        self,
        graph: RelationGraph,
        teacher_clusters: Iterable[Iterable[str]],
        params: GroupingParams,
    ) -> None:
        self.graph = graph
        self.params = params
        self.clusters: List[Cluster] = [Cluster(teachers=set(ts)) for ts in teacher_clusters]
        self.teacher_to_cluster: Dict[str, int] = {}
        self.student_to_cluster: Dict[str, int] = {}
        self.repair_actions: List[RepairAction] = []
        self.coverage_steps: List[CoverageStep] = []

        for idx, cluster in enumerate(self.clusters):
            for t in cluster.teachers:
                self.teacher_to_cluster[t] = idx

    @property
    def hard_max(self) -> int:
        return self.params.hard_max

    # ---------- queries ----------

    def student_overlap(self, student: str, idx: int) -> int:
        return self.graph.student_overlap(student, self.clusters[idx].teachers)

    def own_students_in(self, teacher: str, idx: int, exclude: str | None = None) -> Set[str]:
        """The teacher's students currently placed in cluster `idx`."""
        here = self.graph.students_of(teacher) & self.clusters[idx].students
        if exclude is not None:
            here = here - {exclude}
        return set(here)

    def has_room(self, idx: int) -> bool:
        return len(self.clusters[idx].teachers) + 1 <= self.hard_max

    # ---------- moves ----------

    def add_student(self, student: str, idx: int) -> None:
        self.clusters[idx].students.add(student)
        self.student_to_cluster[student] = idx

    def move_student(self, student: str, target: int) -> int:
        source = self.student_to_cluster[student]
        self.clusters[source].students.discard(student)
        self.clusters[target].students.add(student)
        self.student_to_cluster[student] = target
        return source

    def move_teacher(self, teacher: str, target: int) -> int:
        source = self.teacher_to_cluster[teacher]
        self.clusters[source].teachers.discard(teacher)
        self.clusters[target].teachers.add(teacher)
        self.teacher_to_cluster[teacher] = target
        return source

    # ---------- output ----------

    def to_groups(self) -> List[Group]:
        return [cluster.flatten() for cluster in self.clusters]

    def check_consistency(self) -> None:
        """Raise RuntimeError if the indices disagree with the cluster sets."""
        seen_teachers: Dict[str, int] = {}
        seen_students: Dict[str, int] = {}

        for idx, cluster in enumerate(self.clusters):
            for t in cluster.teachers:
                if t in seen_teachers:
                    raise RuntimeError(
                        f"Teacher {t} is in clusters {seen_teachers[t]} and {idx}."
                    )
                seen_teachers[t] = idx
            for s in cluster.students:
                if s in seen_students:
                    raise RuntimeError(
                        f"Student {s} is in clusters {seen_students[s]} and {idx}."
                    )
                seen_students[s] = idx

        if seen_teachers != self.teacher_to_cluster:
            raise RuntimeError("teacher_to_cluster index is out of sync with clusters.")
        if seen_students != self.student_to_cluster:
            raise RuntimeError("student_to_cluster index is out of sync with clusters.")
