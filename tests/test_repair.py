# tests/test_repair.py
import unittest
import random
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from class_grouping.graph import RelationGraph
from class_grouping.models import GroupingParams
from class_grouping.grouping.state import GroupingState
from class_grouping.grouping.repair import (
    ensure_teachers_have_students,
    improve_student_coverage,
)


def build(pairs, teacher_clusters, placement):
    """State with the given teacher clusters and students placed by hand."""
    graph = RelationGraph.from_pairs(pairs)
    num_teachers = len({t for c in teacher_clusters for t in c})
    state = GroupingState(graph, teacher_clusters, GroupingParams.from_counts(num_teachers, 2))
    for student, idx in placement.items():
        state.add_student(student, idx)
    return state


class TestTeacherHasOwnStudent(unittest.TestCase):

    def test_moves_a_student_to_the_teacher(self):
        pairs = [("T1", "S1"), ("T1", "S2"), ("T2", "S1"), ("T2", "S2"), ("T3", "S3")]
        state = build(pairs, [{"T1", "T2"}, {"T3"}], {"S1": 0, "S2": 0, "S3": 0})

        actions = ensure_teachers_have_students(state, random.Random(0))

        self.assertEqual(len(actions), 1)
        self.assertEqual(actions[0].kind, "move_student")
        self.assertEqual(actions[0].entity, "S3")
        self.assertEqual(state.student_to_cluster["S3"], 1)
        self.assertEqual(state.clusters[1].students, {"S3"})
        state.check_consistency()

    def test_moves_the_teacher_when_no_student_can_leave(self):
        # S1 is the only student of group 0, so it cannot be taken away
        pairs = [("T1", "S1"), ("T2", "S1"), ("T3", "S1"), ("T4", "S2")]
        state = build(pairs, [{"T1", "T2"}, {"T3", "T4"}], {"S1": 0, "S2": 1})

        actions = ensure_teachers_have_students(state, random.Random(0))

        self.assertEqual([(a.kind, a.entity, a.source, a.target) for a in actions],
                         [("move_teacher", "T3", 1, 0)])
        self.assertEqual(state.clusters[0].teachers, {"T1", "T2", "T3"})
        self.assertEqual(state.clusters[1].teachers, {"T4"})
        self.assertEqual(state.teacher_to_cluster["T3"], 0)
        state.check_consistency()

    def test_teacher_without_students_is_accepted(self):
        pairs = [("T1", "S1"), ("T2", "S1")]
        state = build(pairs, [{"T1", "T2", "T9"}], {"S1": 0})

        actions = ensure_teachers_have_students(state, random.Random(0))

        self.assertEqual(actions, [])
        self.assertEqual(state.teacher_to_cluster["T9"], 0)
        state.check_consistency()

    def test_last_teacher_never_leaves_a_group(self):
        # T3 is alone in group 1 and its student sits alone in group 0
        pairs = [("T1", "S1"), ("T2", "S1"), ("T3", "S1")]
        state = build(pairs, [{"T1", "T2"}, {"T3"}], {"S1": 0})

        actions = ensure_teachers_have_students(state, random.Random(0))

        self.assertEqual(actions, [])
        self.assertEqual(state.clusters[1].teachers, {"T3"})


class TestStudentCoverage(unittest.TestCase):

    def test_pulls_a_teacher_into_the_students_group(self):
        pairs = [("TA", "S1"), ("TB", "S1"), ("TC", "S2")]
        state = build(pairs, [{"TA"}, {"TB", "TC"}], {"S1": 0, "S2": 1})

        actions, steps = improve_student_coverage(state, ["S1"])

        self.assertEqual([(a.kind, a.entity) for a in actions], [("move_teacher", "TB")])
        self.assertEqual(state.clusters[0].teachers, {"TA", "TB"})
        self.assertEqual([(s.student, s.before, s.after) for s in steps], [("S1", 1, 2)])
        state.check_consistency()

    def test_records_overlap_lost_by_the_donor_group(self):
        # Pulling TB into group 0 for S1 leaves S2 with only TC
        pairs = [("TA", "S1"), ("TB", "S1"), ("TB", "S2"), ("TC", "S2"), ("TC", "S3")]
        state = build(pairs, [{"TA"}, {"TB", "TC"}], {"S1": 0, "S2": 1, "S3": 1})

        actions, steps = improve_student_coverage(state, ["S1"])

        self.assertEqual([(a.kind, a.entity, a.source, a.target) for a in actions],
                         [("move_teacher", "TB", 1, 0)])
        self.assertEqual(
            [(s.student, s.before, s.after, s.caused_by) for s in steps],
            [("S2", 2, 1, "S1"), ("S1", 1, 2, None)],
        )
        self.assertEqual(state.student_overlap("S2", 1), 1)
        state.check_consistency()

    def test_moves_the_student_when_no_teacher_can_be_pulled(self):
        # TB/TC have no own student left in group 1, so neither may leave
        pairs = [("TA", "S1"), ("TB", "S1"), ("TC", "S1"), ("TA", "S0")]
        state = build(pairs, [{"TA"}, {"TB", "TC"}], {"S0": 0, "S1": 0})

        actions, steps = improve_student_coverage(state, ["S1"])

        self.assertEqual([(a.kind, a.entity, a.source, a.target) for a in actions],
                         [("move_student", "S1", 0, 1)])
        self.assertEqual(state.student_to_cluster["S1"], 1)
        self.assertEqual([(s.student, s.before, s.after) for s in steps], [("S1", 1, 2)])
        state.check_consistency()

    def test_student_stays_if_leaving_would_strand_a_teacher(self):
        # TA's only student in group 0 is S1
        pairs = [("TA", "S1"), ("TB", "S1"), ("TC", "S1"), ("TB", "S0")]
        state = build(pairs, [{"TA"}, {"TB", "TC"}], {"S0": 0, "S1": 0})

        actions, steps = improve_student_coverage(state, ["S1"])

        self.assertEqual(actions, [])
        self.assertEqual(state.student_to_cluster["S1"], 0)
        self.assertEqual([(s.student, s.before, s.after) for s in steps], [("S1", 1, 1)])

    def test_last_student_is_not_moved(self):
        pairs = [("TA", "S1"), ("TB", "S1"), ("TC", "S1")]
        state = build(pairs, [{"TA"}, {"TB", "TC"}], {"S1": 0})

        actions, _ = improve_student_coverage(state, ["S1"])

        self.assertEqual(actions, [])
        self.assertEqual(state.student_to_cluster["S1"], 0)

    def test_covered_students_are_skipped(self):
        pairs = [("T1", "S1"), ("T2", "S1")]
        state = build(pairs, [{"T1", "T2"}], {"S1": 0})

        actions, steps = improve_student_coverage(state, ["S1"])

        self.assertEqual(actions, [])
        self.assertEqual(steps, [])


if __name__ == '__main__':
    unittest.main()
