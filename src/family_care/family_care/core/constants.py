"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LOGIN_LOG_LIMIT = 20

FAMILY_CODE_PREFIX = "FM"
FAMILY_CODE_WIDTH = 4
FAMILY_CODE_ATTEMPTS = 5

MAX_UPLOAD_MB = 5
ALLOWED_IMAGE_MIMETYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

COURSE_CODES = ("101", "201", "301", "401")

# Children's ministry buckets keyed by grade level.
GRADE_GROUPS = {
    "B": "Sprouts",
    "Pre-K": "Dream Kid",
    "1": "Team Kid",
    "2": "Team Kid",
    "3": "Team Kid",
    "4": "Team Kid",
    "5": "Team Kid",
    "6": "Youth(Middle)",
    "7": "Youth(Middle)",
    "8": "Youth(Middle)",
    "9": "Youth(High)",
    "10": "Youth(High)",
    "11": "Youth(High)",
    "12": "Youth(High)",
}

COLLEGE_GROUP = "College/Young Adult"
