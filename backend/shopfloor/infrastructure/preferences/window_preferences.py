"""
Daily window preference store.

Operators configure the scheduling slot as a start instant plus a daily duration.
It is persisted as a small JSON document::

    {"start": "2024-03-04T06:30:00", "durationHours": 12}

The wall-clock part of ``start`` becomes the daily window start; the full instant
is used as the declared start of newly generated schedules.
"""

from datetime import datetime
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from shopfloor.domain.scheduling.value_objects.daily_window import (
    DEFAULT_DAILY_DURATION_HOURS,
    DEFAULT_WINDOW_START,
    DailyWindow,
)
from shopfloor.domain.scheduling.value_objects.time import TimeOfDay

logger = structlog.get_logger(__name__)


class WindowPreference(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: datetime
    duration_hours: float = Field(
        default=DEFAULT_DAILY_DURATION_HOURS, alias="durationHours", gt=0, le=24
    )

    @classmethod
    def default(cls, today: datetime | None = None) -> "WindowPreference":
        today = today or datetime.now()
        return cls(
            start=datetime.combine(today.date(), DEFAULT_WINDOW_START.to_time()),
            duration_hours=DEFAULT_DAILY_DURATION_HOURS,
        )

    def to_window(self) -> DailyWindow:
        return DailyWindow(
            start=TimeOfDay.from_time(self.start),
            daily_duration_hours=self.duration_hours,
        )


class JsonWindowPreferenceStore:
    """Stores a single WindowPreference in a JSON file."""

    def __init__(self, path: str | Path, default: WindowPreference | None = None):
        self._path = Path(path)
        self._default = default

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> WindowPreference:
        """
        Load the saved preference.

        Returns the default preference when nothing was saved yet or the file
        cannot be read.
        """
        if not self._path.exists():
            return self._fallback()
        try:
            return WindowPreference.model_validate_json(self._path.read_text())
        except (OSError, PydanticValidationError) as e:
            logger.warning(
                "window_preference_unreadable", path=str(self._path), error=str(e)
            )
            return self._fallback()

    def save(self, preference: WindowPreference) -> WindowPreference:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(preference.model_dump_json(by_alias=True))
        logger.info(
            "window_preference_saved",
            start=preference.start.isoformat(),
            duration_hours=preference.duration_hours,
        )
        return preference

    def _fallback(self) -> WindowPreference:
        return self._default or WindowPreference.default()
