# Lets uvicorn find the app when started from the repository root:
#   uvicorn main:app --host 0.0.0.0 --port 8001

from academic_calendar.main import app  # noqa: F401
