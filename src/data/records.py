"""
Habit Engine — Persisted record schema.

Shared JSON contract for stored habit collections: an ordered array of habit
objects with camelCase keys, ISO-8601 date-time strings and lowercase weekday
names. Both the rich shape (recurrence + progress) and the legacy flat shape
(frequency + completedDates) are accepted on input; only the rich shape is
written back.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict
from datetime import date, datetime, time
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from src.core.periods import compute_period, end_of_day
from src.data.models import (
    ArchivedPeriod,
    Habit,
    LegacyHabit,
    Measure,
    PeriodProgress,
    Progress,
    Recurrence,
    Subtask,
)
from src.ports.habit_store_port import CorruptPersistedState

logger = logging.getLogger(__name__)

_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_timestamp(value: Any) -> datetime:
    """Read a stored moment as a naive local datetime.

    Accepts datetimes, dates, ISO-8601 strings (with or without offset or a
    trailing Z) and the M/D/YYYY form found in older fixtures.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        raise ValueError(f"Expected a date-time string, got {type(value).__name__}")

    raw = value.strip()
    match = _US_DATE_RE.match(raw)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return datetime(year, month, day)

    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


def _time_entry(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(parse_timestamp(value))
    return value


Timestamp = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str),
]
TimeEntry = Annotated[str, BeforeValidator(_time_entry)]
HabitId = Annotated[str, BeforeValidator(lambda v: str(v) if isinstance(v, int) else v)]


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecurrenceRecord(_Record):
    type: str
    times_per_day: int | None = None
    times_per_week: int | None = None
    times_per_month: int | None = None
    times_per_year: int | None = None
    days_of_week: list[str] | None = None
    days_of_month: list[int] | None = None
    months_of_year: list[int] | None = None
    week_start: str = "monday"
    specific_times: list[str] = Field(default_factory=list)
    preferred_days_of_week: list[str] | None = None


class PeriodRecord(_Record):
    period_start: Timestamp
    period_end: Timestamp | None = None    # absent in some hand-written fixtures
    completions: int = Field(default=0, ge=0)
    target: int = Field(default=0, ge=0)
    completion_dates: list[Timestamp] = Field(default_factory=list)
    completion_times: list[TimeEntry] = Field(default_factory=list)
    subtasks_completed: list[str] = Field(default_factory=list)


class HistoryRecord(PeriodRecord):
    completed: bool = False
    notes: str | None = None


class ProgressRecord(_Record):
    current_period: PeriodRecord
    history: list[HistoryRecord] = Field(default_factory=list)
    streak: int = Field(default=0, ge=0)


class SubtaskRecord(_Record):
    id: HabitId
    name: str
    description: str | None = None


class MeasureRecord(_Record):
    target: float
    unit: str


class HabitRecord(_Record):
    """Rich habit record.

    JSON example:
    {
        "id": "5b0c...",
        "name": "Drink water",
        "description": "",
        "creationDate": "2025-05-10T00:00:00.000",
        "active": true,
        "recurrence": {"type": "daily", "timesPerDay": 1},
        "progress": {
            "currentPeriod": {
                "periodStart": "2025-05-16T00:00:00.000",
                "periodEnd": "2025-05-16T23:59:59.999",
                "completions": 0,
                "target": 1
            },
            "history": [],
            "streak": 5
        },
        "timeOfDay": "morning"
    }
    """

    id: HabitId
    name: str
    description: str = ""
    creation_date: Timestamp
    category: str | None = None
    color: str | None = None
    active: bool = True
    recurrence: RecurrenceRecord
    progress: ProgressRecord
    subtasks: list[SubtaskRecord] | None = None
    duration: MeasureRecord | None = None
    amount: MeasureRecord | None = None
    time_of_day: str = "anytime"

    def to_habit(self) -> Habit:
        recurrence = Recurrence(**self.recurrence.model_dump())
        current = self.progress.current_period
        return Habit(
            id=self.id,
            name=self.name,
            description=self.description,
            creation_date=self.creation_date,
            category=self.category,
            color=self.color,
            active=self.active,
            recurrence=recurrence,
            progress=Progress(
                current_period=PeriodProgress(**_period_values(current, recurrence)),
                history=[
                    ArchivedPeriod(
                        **_period_values(h, recurrence),
                        completed=h.completed,
                        notes=h.notes,
                    )
                    for h in self.progress.history
                ],
                streak=self.progress.streak,
            ),
            subtasks=(
                [Subtask(**s.model_dump()) for s in self.subtasks]
                if self.subtasks is not None else None
            ),
            duration=Measure(**self.duration.model_dump()) if self.duration else None,
            amount=Measure(**self.amount.model_dump()) if self.amount else None,
            time_of_day=self.time_of_day,
        )

    @classmethod
    def from_habit(cls, habit: Habit) -> HabitRecord:
        return cls.model_validate(asdict(habit))


class LegacyHabitRecord(_Record):
    """Flat habit record from the earlier storage format.

    JSON example:
    {
        "id": "1c9e...",
        "name": "Read",
        "description": "",
        "frequency": "specific-days",
        "specificDays": ["monday", "thursday"],
        "timeOfDay": "evening",
        "createdAt": "2025-04-02T18:00:00.000Z",
        "streak": 3,
        "completedDates": ["2025-05-12", "2025-05-15"]
    }
    """

    id: HabitId
    name: str
    description: str = ""
    frequency: str
    specific_days: list[str] = Field(default_factory=list)
    time_of_day: str = "anytime"
    created_at: str = ""
    streak: int = Field(default=0, ge=0)
    completed_dates: list[str] = Field(default_factory=list)

    def to_legacy(self) -> LegacyHabit:
        return LegacyHabit(**self.model_dump())


def is_legacy_payload(item: dict) -> bool:
    return "recurrence" not in item and (
        "frequency" in item or "completedDates" in item
    )


def parse_collection(raw: Any) -> list[HabitRecord | LegacyHabitRecord]:
    """Validate a decoded collection, record by record.

    Raises:
        CorruptPersistedState: if the payload is not a list of habit
            objects or any record fails validation.
    """
    if not isinstance(raw, list):
        raise CorruptPersistedState(
            f"Habit collection must be a JSON array, got {type(raw).__name__}"
        )

    records: list[HabitRecord | LegacyHabitRecord] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise CorruptPersistedState(f"Habit record #{index} is not an object")
        model = LegacyHabitRecord if is_legacy_payload(item) else HabitRecord
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            raise CorruptPersistedState(
                f"Habit record #{index} is invalid: {exc}"
            ) from exc
    return records


def dump_habit(habit: Habit) -> dict:
    return HabitRecord.from_habit(habit).model_dump(
        mode="json", by_alias=True, exclude_none=True,
    )


def dump_collection(habits: list[Habit]) -> list[dict]:
    return [dump_habit(h) for h in habits]


def _period_values(record: PeriodRecord, recurrence: Recurrence) -> dict:
    period_end = record.period_end
    if period_end is None:
        period_end = compute_period(
            recurrence.type, record.period_start, recurrence.week_start,
        ).end
    else:
        # Boundaries are day-granular; a date-only end covers the whole day.
        period_end = end_of_day(period_end)

    completion_times = []
    for entry in record.completion_times:
        moment = _read_time_entry(entry, record.period_start)
        if moment is None:
            logger.warning("Skipping unreadable completion time %r", entry)
            continue
        completion_times.append(moment)

    return {
        "period_start": record.period_start,
        "period_end": period_end,
        "completions": record.completions,
        "target": record.target,
        "completion_dates": list(record.completion_dates),
        "completion_times": completion_times,
        "subtasks_completed": list(record.subtasks_completed),
    }


def _read_time_entry(entry: str, period_start: datetime) -> datetime | None:
    """Completion times are full timestamps, or bare HH:MM in old fixtures."""
    match = _HHMM_RE.match(entry.strip())
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if 0 <= hour <= 23 and 0 <= minute <= 59:
            return datetime.combine(period_start.date(), time(hour, minute))
        return None
    try:
        return parse_timestamp(entry)
    except ValueError:
        return None
