# class_grouping/models.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Set, Tuple, Optional

from .config import MIN_TEACHERS_PER_GROUP

Pairing = Tuple[str, str]   # (teacher_id, student_id)
Group = List[str]           # teachers followed by students


@dataclass
class Cluster:
    teachers: Set[str] = field(default_factory=set)
    students: Set[str] = field(default_factory=set)

    def flatten(self) -> Group:
        return sorted(self.teachers) + sorted(self.students)


@dataclass(frozen=True)
class GroupingParams:
    target: int
    target_group_count: int
    hard_max: int

    @classmethod
    def from_counts(cls, num_teachers: int, teachers_per_group: int) -> GroupingParams:
        """
        target             = max(2, teachers_per_group)
        target_group_count = max(1, round(num_teachers / target))   (half-up)
        hard_max           = max(target + 1, ceil(num_teachers / target_group_count) + 1)
        """
        target = max(MIN_TEACHERS_PER_GROUP, teachers_per_group)
        target_group_count = max(1, math.floor(num_teachers / target + 0.5))
        hard_max = max(target + 1, math.ceil(num_teachers / target_group_count) + 1)
        return cls(target=target, target_group_count=target_group_count, hard_max=hard_max)


@dataclass
class RepairAction:
    phase: str                 # "A" or "B"
    kind: str                  # "move_student" or "move_teacher"
    entity: str
    source: int
    target: int
    reason: Optional[str] = None


@dataclass
class ClassList:
    teachers: List[str]
    students: List[str]
    pairings: List[Pairing]


@dataclass
class CoverageStep:
    student: str
    before: int
    after: int
    # Set when the drop came from another student's repair pulling a teacher away
    caused_by: Optional[str] = None
