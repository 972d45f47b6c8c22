# run_grouping.py

import argparse
import sys

from class_grouping.config import (
    CLASS_LIST_SHEET,
    DEFAULT_SEARCH_ATTEMPTS,
    DEFAULT_TEACHERS_PER_GROUP,
)
from class_grouping.graph import RelationGraph
from class_grouping.grouping.diagnostics import analyze_groupings
from class_grouping.grouping.engine import search_groupings
from class_grouping.spreadsheets.workbook import read_class_list, read_groups, write_groups


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Group teachers and the students they share into small groups."
    )
    parser.add_argument("class_list", help="class list spreadsheet (.xlsx or .csv)")
    parser.add_argument("-o", "--output", default="result.xlsx", help="where to write the groups")
    parser.add_argument("--sheet", default=CLASS_LIST_SHEET, help="sheet holding the class list")
    parser.add_argument(
        "--selection-column",
        default=None,
        help="column listing the student IDs to include (default: everyone)",
    )
    parser.add_argument("-k", "--teachers-per-group", type=int, default=DEFAULT_TEACHERS_PER_GROUP)
    parser.add_argument("-n", "--attempts", type=int, default=DEFAULT_SEARCH_ATTEMPTS)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--check",
        metavar="RESULT",
        default=None,
        help="only re-check an existing result file against the class list",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def print_report(report):
    print("\n=== DIAGNOSTICS ===")
    print(f"- Groups: {report['num_groups']} (teacher cap {report['hard_max']})")
    if report["messages"]:
        for msg in report["messages"]:
            print("-", msg)
    else:
        print("- No issues detected.")
    print("Suggestion:", report["suggestion"])


def main(argv=None):
    args = parse_args(argv)

    try:
        class_list = read_class_list(args.class_list, args.sheet, args.selection_column)
    except (OSError, ValueError) as exc:
        print(f"Could not read class list: {exc}", file=sys.stderr)
        return 1

    graph = RelationGraph.from_pairs(class_list.pairings)
    print(f"Loaded {graph.num_teachers} teachers and {graph.num_students} students.")

    if args.check:
        try:
            groups = read_groups(args.check)
        except (OSError, ValueError) as exc:
            print(f"Could not read result: {exc}", file=sys.stderr)
            return 1
        print_report(analyze_groupings(graph, groups, args.teachers_per_group))
        return 0

    try:
        result = search_groupings(
            graph,
            args.teachers_per_group,
            attempts=args.attempts,
            seed=args.seed,
            verbose=args.verbose,
        )
    except ValueError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return 1

    print(f"Best grouping from attempt {result.attempt} of {result.attempts_run}.")
    print_report(result.report)

    try:
        write_groups(result.groups, args.output)
    except (OSError, ValueError) as exc:
        print(f"Could not write result: {exc}", file=sys.stderr)
        return 1

    print(f"\nWrote {len(result.groups)} group(s) to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
