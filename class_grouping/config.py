# class_grouping/config.py

# Grouping knobs
DEFAULT_TEACHERS_PER_GROUP = 4
MIN_TEACHERS_PER_GROUP = 2

# A student is "covered" when this many of their teachers share their group
TARGET_STUDENT_OVERLAP = 2

# Random seed for reproducible runs
DEFAULT_SEED = 42

# Attempts for the multi-run search ("auto" mode)
DEFAULT_SEARCH_ATTEMPTS = 25

# Toy data knobs
NUM_TEACHERS_DEFAULT = 24
NUM_STUDENTS_DEFAULT = 60
CLASSES_PER_STUDENT_DEFAULT = 4
NUM_COHORTS_DEFAULT = 6
CROSS_COHORT_PROB_DEFAULT = 0.15

# -----------------------------------------------------------
# Class-list spreadsheet layout
# -----------------------------------------------------------

CLASS_LIST_SHEET = "Info for EUA"

STUDENT_ID_COL = "Student ID"
STUDENT_FIRST_NAME_COL = "Student First Name"
STUDENT_LAST_NAME_COL = "Student Last Name"
STUDENT_YEAR_COL = "Student Year Level"
TEACHER_FIRST_NAME_COL = "First Name"
TEACHER_MIDDLE_NAME_COL = "Middle Name"
TEACHER_SURNAME_COL = "Surname"

# Timetable rows that are not a teacher
NON_TEACHER_NAMES = {"Study Period"}

# Sheet name used when writing results
RESULT_SHEET = "Sheet1"
