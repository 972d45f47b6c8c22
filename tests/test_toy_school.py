# tests/test_toy_school.py
import unittest
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from class_grouping.data_generation.toy_school import make_toy_school


class TestToySchool(unittest.TestCase):

    def test_each_student_takes_distinct_classes(self):
        pairs = make_toy_school(num_teachers=12, num_students=20, classes_per_student=3, seed=1)
        self.assertEqual(len(pairs), 60)
        self.assertEqual(len(set(pairs)), 60)

        per_student = {}
        for t, s in pairs:
            per_student.setdefault(s, set()).add(t)
        self.assertEqual(len(per_student), 20)
        self.assertTrue(all(len(ts) == 3 for ts in per_student.values()))

    def test_more_classes_than_teachers(self):
        pairs = make_toy_school(num_teachers=2, num_students=3, classes_per_student=5, seed=0)
        self.assertEqual(len(pairs), 6)

    def test_seed_is_reproducible(self):
        self.assertEqual(make_toy_school(seed=7), make_toy_school(seed=7))
        self.assertNotEqual(make_toy_school(seed=7), make_toy_school(seed=8))

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            make_toy_school(num_teachers=0)
        with self.assertRaises(ValueError):
            make_toy_school(num_students=0)
        with self.assertRaises(ValueError):
            make_toy_school(classes_per_student=0)
        with self.assertRaises(ValueError):
            make_toy_school(cross_cohort_prob=1.5)


if __name__ == '__main__':
    unittest.main()
