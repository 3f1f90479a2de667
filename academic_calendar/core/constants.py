"""
Service-wide constants and display labels
"""

SERVICE_NAME = "academic-calendar-backend"

# Placeholder labels used by aggregation when upstream data is incomplete
UNNAMED_TERM_LABEL = "名称未設定"
UNCLASSIFIED_TERM_LABEL = "未分類"

# Sunday-first, matches date.isoweekday() % 7
WEEKDAY_LABELS = ("日", "月", "火", "水", "木", "金", "土")

# Vacation buckets: (key, reserved term name)
VACATION_BUCKETS = (
    ("springBreak", "春休み"),
    ("summerBreak", "夏休み"),
    ("winterBreak", "冬休み"),
)

# Saturday/Sunday targets for weekly closures, in isoweekday numbering
WEEKLY_HOLIDAY_TARGETS = {
    "saturday": 6,
    "sunday": 7,
}
