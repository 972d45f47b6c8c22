# tests/test_student_assignment.py
import unittest
import random
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from class_grouping.graph import RelationGraph
from class_grouping.models import GroupingParams
from class_grouping.grouping.state import GroupingState
from class_grouping.grouping.student_assignment import assign_students


PAIRS = [
    ("T1", "S1"), ("T1", "S2"),
    ("T2", "S1"), ("T2", "S2"),
    ("T3", "S3"), ("T4", "S3"),
    ("T1", "S4"), ("T3", "S4"),   # split evenly between the two clusters
]


class TestAssignStudents(unittest.TestCase):

    def make_state(self):
        graph = RelationGraph.from_pairs(PAIRS)
        params = GroupingParams.from_counts(4, 2)
        return GroupingState(graph, [{"T1", "T2"}, {"T3", "T4"}], params)

    def test_students_follow_their_teachers(self):
        state = self.make_state()
        assign_students(state, ["S1", "S2", "S3"], random.Random(0))

        self.assertEqual(state.clusters[0].students, {"S1", "S2"})
        self.assertEqual(state.clusters[1].students, {"S3"})
        self.assertEqual(state.student_to_cluster, {"S1": 0, "S2": 0, "S3": 1})
        state.check_consistency()

    def test_visiting_order_is_a_permutation(self):
        state = self.make_state()
        students = ["S1", "S2", "S3", "S4"]
        order = assign_students(state, students, random.Random(4))
        self.assertEqual(sorted(order), students)

    def test_every_student_is_placed_even_without_teachers(self):
        state = self.make_state()
        assign_students(state, ["S1", "NOBODY"], random.Random(2))
        self.assertIn("NOBODY", state.student_to_cluster)
        state.check_consistency()

    def test_ties_are_broken_randomly(self):
        chosen = set()
        for seed in range(50):
            state = self.make_state()
            assign_students(state, ["S4"], random.Random(seed))
            chosen.add(state.student_to_cluster["S4"])
        self.assertEqual(chosen, {0, 1})


if __name__ == '__main__':
    unittest.main()
