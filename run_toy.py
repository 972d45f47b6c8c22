# run_toy.py

import pandas as pd

from class_grouping.config import DEFAULT_SEED, DEFAULT_TEACHERS_PER_GROUP, DEFAULT_SEARCH_ATTEMPTS
from class_grouping.data_generation.toy_school import make_toy_school
from class_grouping.graph import RelationGraph
from class_grouping.grouping.diagnostics import split_group
from class_grouping.grouping.engine import search_groupings


def summarize_groups(graph: RelationGraph, groups: list) -> pd.DataFrame:
    """One row per group: teachers, student count, and how well they are covered."""
    rows = []
    for i, group in enumerate(groups):
        teachers, students = split_group(graph, group)
        overlaps = [graph.student_overlap(s, set(teachers)) for s in students]
        rows.append(
            {
                "group": i,
                "teachers": ", ".join(teachers),
                "num_teachers": len(teachers),
                "num_students": len(students),
                "min_overlap": min(overlaps) if overlaps else 0,
                "mean_overlap": sum(overlaps) / len(overlaps) if overlaps else 0.0,
                "below_2": sum(1 for ov in overlaps if ov < 2),
            }
        )
    return pd.DataFrame(rows).set_index("group")


def main():
    # ---- Session settings ----
    teachers_per_group = DEFAULT_TEACHERS_PER_GROUP
    attempts = DEFAULT_SEARCH_ATTEMPTS

    # ---- Generate toy school ----
    pairs = make_toy_school(seed=DEFAULT_SEED)
    graph = RelationGraph.from_pairs(pairs)
    print(f"Toy school: {graph.num_teachers} teachers, {graph.num_students} students, {len(pairs)} pairs.")
    print()

    # ============================
    #  TEACHER NEIGHBOURHOODS
    # ============================
    teachers = sorted(graph.teachers)
    df_overlap = pd.DataFrame(
        [[graph.overlap_count(a, b) if a != b else 0 for b in teachers] for a in teachers],
        index=teachers,
        columns=teachers,
    )
    print("=== SHARED STUDENTS PER TEACHER PAIR ===")
    print(df_overlap)
    print()

    # ============================
    #  GROUPING SEARCH
    # ============================
    print(f"=== GROUPING ({teachers_per_group} teachers per group, up to {attempts} attempts) ===")
    result = search_groupings(
        graph,
        teachers_per_group,
        attempts=attempts,
        seed=DEFAULT_SEED,
        verbose=True,
    )
    print()

    print("=== GROUPS ===")
    print(summarize_groups(graph, result.groups).round(2))
    print()

    report = result.report
    print("=== DIAGNOSTICS ===")
    if report["messages"]:
        for msg in report["messages"]:
            print("-", msg)
    else:
        print("- No issues detected.")
    print("Suggestion:", report["suggestion"])


if __name__ == "__main__":
    main()
