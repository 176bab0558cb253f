"""
Runtime configuration for TopicPath.

Settings come from environment variables, optionally seeded from a .env
file via python-dotenv:

- TOPICPATH_CLASSROOM_DB: compiled classroom database (default: data/classroom.db)
- TOPICPATH_PROGRESS_DB: learner progress database (default: ~/.topicpath/progress.db)
- TOPICPATH_LEARNER_ID: learner whose progress is tracked (default: "default")
- TOPICPATH_DEFAULT_LOCALE: locale used when none is requested (default: "en")
- TOPICPATH_RECENT_WINDOW_DAYS: ongoing stories touched within this many
  days are "recent" (default: 7)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from topicpath.utils import days_to_ms


DEFAULT_DATA_DIR = Path.home() / ".topicpath"
DEFAULT_CLASSROOM_DB = Path("data/classroom.db")
DEFAULT_PROGRESS_DB = DEFAULT_DATA_DIR / "progress.db"
DEFAULT_LOCALE = "en"
RECENT_WINDOW_DAYS = 7

# Ongoing stories updated less than this long before "now" are recent.
RECENT_STORY_WINDOW_MS = days_to_ms(RECENT_WINDOW_DAYS)


@dataclass(frozen=True)
class Settings:
    classroom_db: Path = DEFAULT_CLASSROOM_DB
    progress_db: Path = DEFAULT_PROGRESS_DB
    learner_id: str = "default"
    default_locale: str = DEFAULT_LOCALE
    recent_window_days: int = RECENT_WINDOW_DAYS

    @property
    def recent_window_ms(self) -> int:
        return days_to_ms(self.recent_window_days)


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional .env file to load first. Variables already set in
            the process environment take precedence over the file.

    Raises:
        ValueError: If TOPICPATH_RECENT_WINDOW_DAYS is not a positive integer
    """
    load_dotenv(env_file)

    window = os.environ.get("TOPICPATH_RECENT_WINDOW_DAYS", str(RECENT_WINDOW_DAYS))
    try:
        window_days = int(window)
    except ValueError:
        raise ValueError(f"TOPICPATH_RECENT_WINDOW_DAYS must be an integer, got {window!r}")
    if window_days <= 0:
        raise ValueError(f"TOPICPATH_RECENT_WINDOW_DAYS must be positive, got {window_days}")

    return Settings(
        classroom_db=Path(os.environ.get("TOPICPATH_CLASSROOM_DB", DEFAULT_CLASSROOM_DB)),
        progress_db=Path(os.environ.get("TOPICPATH_PROGRESS_DB", DEFAULT_PROGRESS_DB)).expanduser(),
        learner_id=os.environ.get("TOPICPATH_LEARNER_ID", "default"),
        default_locale=os.environ.get("TOPICPATH_DEFAULT_LOCALE", DEFAULT_LOCALE),
        recent_window_days=window_days,
    )
