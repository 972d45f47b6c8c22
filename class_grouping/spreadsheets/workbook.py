# class_grouping/spreadsheets/workbook.py
from __future__ import annotations

import os
from typing import Any, List, Optional, Sequence

import pandas as pd

from ..config import (
    CLASS_LIST_SHEET,
    NON_TEACHER_NAMES,
    RESULT_SHEET,
    STUDENT_FIRST_NAME_COL,
    STUDENT_ID_COL,
    STUDENT_LAST_NAME_COL,
    STUDENT_YEAR_COL,
    TEACHER_FIRST_NAME_COL,
    TEACHER_MIDDLE_NAME_COL,
    TEACHER_SURNAME_COL,
)
from ..models import ClassList, Pairing

CSV_SUFFIXES = (".csv",)
EXCEL_SUFFIXES = (".xlsx", ".xls")

REQUIRED_COLUMNS = [
    STUDENT_ID_COL,
    STUDENT_FIRST_NAME_COL,
    STUDENT_LAST_NAME_COL,
    STUDENT_YEAR_COL,
    TEACHER_FIRST_NAME_COL,
    TEACHER_SURNAME_COL,
]


def _suffix(path: str) -> str:
    suffix = os.path.splitext(path)[1].lower()
    if suffix not in CSV_SUFFIXES + EXCEL_SUFFIXES:
        raise ValueError(
            f"Unsupported spreadsheet type '{suffix}' for {path}. "
            f"Use one of: {', '.join(CSV_SUFFIXES + EXCEL_SUFFIXES)}."
        )
    return suffix


def _cell_text(value: Any) -> str:
    """Render a cell as text; blanks (None/NaN/'') become ''."""
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


# ======================================================================
#  Class list -> pairings
# ======================================================================

def teacher_name(row: pd.Series) -> str:
    first = _cell_text(row[TEACHER_FIRST_NAME_COL])
    middle = _cell_text(row.get(TEACHER_MIDDLE_NAME_COL))
    surname = _cell_text(row[TEACHER_SURNAME_COL])
    if middle:
        return f"{first} {middle} {surname}"
    return f"{first} {surname}"


def student_name(row: pd.Series) -> str:
    return (
        f"{_cell_text(row[STUDENT_ID_COL])} "
        f"Y{_cell_text(row[STUDENT_YEAR_COL])} "
        f"{_cell_text(row[STUDENT_FIRST_NAME_COL])} "
        f"{_cell_text(row[STUDENT_LAST_NAME_COL])}"
    )


def _unique(items: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(items))


def read_class_list(
    path: str,
    sheet_name: str = CLASS_LIST_SHEET,
    selection_column: Optional[str] = None,
) -> ClassList:
    """
    Read a class list (one row per student/class-teacher pair) and return
    the teachers, students and (teacher, student) pairings.

    If `selection_column` is given, only students whose ID is listed in
    that column (anywhere in the sheet) are kept.
    """
    if _suffix(path) in CSV_SUFFIXES:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype=str)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if selection_column is not None and selection_column not in df.columns:
        missing.append(selection_column)
    if missing:
        raise ValueError(
            f"Class list {path} is missing column(s): {missing}.\n"
            f"  found columns: {list(df.columns)}"
        )

    student_ids = df[STUDENT_ID_COL].map(_cell_text)

    if selection_column is not None:
        # The selection list may run past the end of the class list
        selected = {_cell_text(v) for v in df[selection_column]} - {""}
        df = df[student_ids.isin(selected)]
    else:
        df = df[student_ids != ""]

    pairings: List[Pairing] = []
    for _, row in df.iterrows():
        teacher = teacher_name(row)
        if teacher in NON_TEACHER_NAMES:
            continue
        pairings.append((teacher, student_name(row)))

    return ClassList(
        teachers=_unique([t for t, _ in pairings]),
        students=_unique([s for _, s in pairings]),
        pairings=pairings,
    )


# ======================================================================
#  Groups <-> result sheet
# ======================================================================

def write_groups(groups: Sequence[Sequence[str]], path: str) -> None:
    """One row per group, no header. Shorter rows are padded with blanks."""
    suffix = _suffix(path)
    df = pd.DataFrame([list(g) for g in groups]) if groups else pd.DataFrame()

    if suffix in CSV_SUFFIXES:
        if df.empty:
            # pandas would still write a blank line
            with open(path, "w"):
                pass
        else:
            df.to_csv(path, header=False, index=False)
    else:
        df.to_excel(path, sheet_name=RESULT_SHEET, header=False, index=False)


def _trim_row(values: Sequence[Any]) -> List[str]:
    row = [_cell_text(v) for v in values]
    while row and row[-1] == "":
        row.pop()
    return row


def read_groups(path: str) -> List[List[str]]:
    """
    Load a previously written result: first sheet, trailing blanks trimmed,
    empty rows dropped.
    """
    suffix = _suffix(path)
    try:
        if suffix in CSV_SUFFIXES:
            df = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(path, sheet_name=0, header=None, dtype=str)
    except pd.errors.EmptyDataError:
        return []

    rows = [_trim_row(values) for values in df.itertuples(index=False, name=None)]
    return [row for row in rows if row]
