"""
Constants for the curriculum content model.

No magic strings - document store paths, field names and roles live here.
"""

# Top-level collections
COURSES = "courses"
LESSONS = "lessons"
ADMINS = "admins"

# Sub-collection of a course document
RUDIMENTS = "rudiments"

# Role value in admins/{uid} that grants editor access
ADMIN_ROLE = "admin"

# Prefix of a course-scoped rudiment reference: course:<courseId>:<rudimentId>
COURSE_REF_PREFIX = "course"
REF_SEPARATOR = ":"

# Length of generated document IDs
DOCUMENT_ID_LENGTH = 20


def course_rudiments_path(course_id: str) -> str:
    """Collection path of the rudiments nested under a course."""
    return f"{COURSES}/{course_id}/{RUDIMENTS}"


class ErrorMessages:
    """Standardized error messages."""

    COURSE_NOT_FOUND = "Course '{course_id}' not found."
    LESSON_NOT_FOUND = "Lesson '{lesson_id}' not found."
    RUDIMENT_NOT_FOUND = "Rudiment '{rudiment_id}' not found in course '{course_id}'."
    INVALID_DIRECTION = "Invalid direction: '{direction}'. Expected 'up' or 'down'."
    RESERVED_CATALOG_ID = (
        "Catalog ID '{catalog_id}' would parse as a course-scoped reference. "
        "Global catalog IDs must not use the 'course:<id>:<id>' shape."
    )
    PARTIAL_REORDER = (
        "Reorder partially applied: '{first}' now has order {order}, "
        "write to '{second}' failed."
    )
    STALE_ORDER = (
        "Order of '{doc_id}' changed since the list was read "
        "(expected {expected}, found {found}). Reload the list and move again."
    )


class SuccessMessages:
    """Standardized success messages."""

    COURSE_CREATED = "Created course '{title}'."
    LESSON_CREATED = "Created lesson '{title}'."
    RUDIMENT_CREATED = "Created rudiment '{name}'."
    DELETED = "Deleted '{doc_id}'."
