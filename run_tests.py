# run_tests.py
import os
import sys
import unittest

ROOT = os.path.dirname(os.path.abspath(__file__))
TESTS_DIR = os.path.join(ROOT, "tests")

# (banner, file pattern) for each area of the package
SUITES = [
    ("Relation graph", "test_graph.py"),
    ("Teacher clustering", "test_teacher_clusters.py"),
    ("Student assignment", "test_student_assignment.py"),
    ("Repair phases", "test_repair.py"),
    ("Engine scenarios and search", "test_scenarios.py"),
    ("Diagnostics", "test_diagnostics.py"),
    ("Toy school data", "test_toy_school.py"),
    ("Spreadsheets", "test_workbook.py"),
]


def load_suite(pattern):
    return unittest.defaultTestLoader.discover(TESTS_DIR, pattern=pattern)


def run_suite(name, pattern, verbosity=1):
    print(f"\n{'='*20}\nRUNNING TESTS: {name}\n{'='*20}")
    result = unittest.TextTestRunner(verbosity=verbosity).run(load_suite(pattern))
    return result.wasSuccessful()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    verbosity = 2 if "-v" in argv else 1

    if ROOT not in sys.path:
        sys.path.insert(0, ROOT)

    failed = [name for name, pattern in SUITES if not run_suite(name, pattern, verbosity)]

    if failed:
        print(f"\n[RESULT] {len(failed)} suite(s) failed: {failed}")
        return 1
    print(f"\n[RESULT] All {len(SUITES)} suites passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
