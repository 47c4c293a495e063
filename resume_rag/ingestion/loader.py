"""Load raw profile documents from disk."""

import json
import logging
from pathlib import Path

from resume_rag.errors import ValidationError
from resume_rag.models.profile import ProfileDocument

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_PATH = Path("resumeData.json")


def load_profile(path: str | Path | None = None) -> ProfileDocument:
    """Read and validate a profile JSON file.

    Raises:
        ValidationError: if the file is missing, is not valid JSON, or fails
            profile validation (the error lists every problem).
    """
    path = Path(path) if path else DEFAULT_PROFILE_PATH

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ValidationError(f"Profile data file not found: {path}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in profile data file: {path}", [str(e)]) from e

    profile = ProfileDocument.from_dict(data)
    logger.info("Loaded profile for %s from %s", profile.name, path)
    return profile
