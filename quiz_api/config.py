"""Application configuration and constants."""
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Directories
DATA_DIR = Path(os.environ.get("QUIZ_DATA_DIR", Path.cwd() / "data"))

QUESTIONS_PATH = Path(
    os.environ.get("QUESTIONS_PATH", DATA_DIR / "questions.json")
)
CASE_STUDIES_PATH = Path(
    os.environ.get("CASE_STUDIES_PATH", DATA_DIR / "case_studies.json")
)
PROGRESS_DIR = Path(os.environ.get("PROGRESS_DIR", DATA_DIR / "progress"))

# Progress snapshot lives under one namespaced key
PROGRESS_STORAGE_KEY = os.environ.get("PROGRESS_STORAGE_KEY", "dp600_progress_v1")

# Remote question backend (unset means local JSON only)
QUESTIONS_DATABASE_URL = os.environ.get("QUESTIONS_DATABASE_URL") or None

# Scoring
POINTS_PER_CORRECT = _parse_int_env("POINTS_PER_CORRECT", 10)

# Filter sentinel meaning "no filter"
ALL_FILTER = "All"
