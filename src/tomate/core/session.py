"""Session and history dataclasses for tomate."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

POMODORO = "pomodoro"
SHORT_BREAK = "shortbreak"
LONG_BREAK = "longbreak"

VALID_KINDS = (POMODORO, SHORT_BREAK, LONG_BREAK)


def local_now() -> datetime:
    """Current time as a timezone-aware datetime in the local zone."""
    return datetime.now().astimezone()


def normalize_tags(tags) -> list[str]:
    """Strip, drop empties and de-duplicate tags, keeping first occurrence."""
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


@dataclass
class SessionRecord:
    """The single in-progress Pomodoro or break.

    Attributes:
        kind: One of "pomodoro", "shortbreak", "longbreak"
        started_at: Timezone-aware start time
        duration: Target length of the session
        description: What the Pomodoro is about (Pomodoros only)
        tags: Tags for the Pomodoro, no duplicates (Pomodoros only)
        notified: True once the end hook has fired for this session
    """

    kind: str
    started_at: datetime
    duration: timedelta
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    notified: bool = False

    def __post_init__(self) -> None:
        """Validate kind, timestamp and duration."""
        if self.kind not in VALID_KINDS:
            raise ValueError(
                f"Invalid kind: {self.kind}. Must be one of {VALID_KINDS}"
            )
        if self.started_at.tzinfo is None:
            raise ValueError("started_at must be timezone-aware")
        if self.duration <= timedelta(0):
            raise ValueError("duration must be positive")
        self.tags = normalize_tags(self.tags)

    @property
    def is_break(self) -> bool:
        return self.kind != POMODORO

    @property
    def ends_at(self) -> datetime:
        return self.started_at + self.duration

    def elapsed(self, now: datetime) -> timedelta:
        return now - self.started_at

    def remaining(self, now: datetime) -> timedelta:
        return max(timedelta(0), self.duration - self.elapsed(now))

    def is_expired(self, now: datetime) -> bool:
        return self.elapsed(now) >= self.duration


@dataclass(frozen=True)
class HistoryEntry:
    """A completed Pomodoro as stored in the history log."""

    started_at: datetime
    ended_at: datetime
    tags: tuple[str, ...] = ()
    description: str | None = None

    @property
    def duration(self) -> timedelta:
        """Actual time between start and finish."""
        return self.ended_at - self.started_at
