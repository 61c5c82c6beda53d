# Lets uvicorn find the app from the repository root:
#   uvicorn main:app --host 0.0.0.0 --port 8001

from staffdesk.main import app  # noqa: F401
