"""Data models for the round-robin schedule generator."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class TimeSlot:
    """A bookable window. end > start is guaranteed by whoever built it."""
    slot_id: str
    start: datetime
    end: datetime

    def __str__(self):
        return f"{self.slot_id} {self.start:%Y-%m-%d %H:%M}-{self.end:%H:%M}"


@dataclass
class Team:
    """A team and the slot ids each of its members declared."""
    code: str
    members: dict[str, set[str]] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.members)

    def declare(self, member: str, slot_ids) -> None:
        self.members[member] = set(slot_ids)

    def clear_declarations(self) -> None:
        for member in self.members:
            self.members[member] = set()


@dataclass(frozen=True)
class Pairing:
    """An unordered pair of distinct teams, identified by its enumeration index."""
    index: int
    team_a: str
    team_b: str

    def __str__(self):
        return f"{self.team_a} vs {self.team_b}"


@dataclass(frozen=True)
class Match:
    """A pairing bound to one slot's start/end instants."""
    team_a: str
    team_b: str
    slot_start: datetime
    slot_end: datetime
    slot_id: str = ""

    def involves(self, team_code: str) -> bool:
        return team_code in (self.team_a, self.team_b)

    def opponent(self, team_code: str) -> str:
        if team_code == self.team_a:
            return self.team_b
        return self.team_a


class ScheduleStatus(Enum):
    NOT_GENERATED = "not_generated"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ScheduleState:
    """Mutable per-tournament schedule record owned by the caller.

    The scheduler only asks it to change status, store matches, or forget
    team availability; persisting it is somebody else's job.
    """
    teams: list[Team] = field(default_factory=list)
    slots: list[TimeSlot] = field(default_factory=list)
    quorum: int = 1
    status: ScheduleStatus = ScheduleStatus.NOT_GENERATED
    error_message: Optional[str] = None
    matches: list[Match] = field(default_factory=list)

    @property
    def is_generating(self) -> bool:
        return self.status == ScheduleStatus.GENERATING

    def begin_generation(self) -> None:
        self.status = ScheduleStatus.GENERATING
        self.error_message = None
        self.matches = []

    def set_success(self, matches: list[Match]) -> None:
        self.status = ScheduleStatus.SUCCESS
        self.error_message = None
        self.matches = list(matches)

    def set_error(self, message: str) -> None:
        self.status = ScheduleStatus.ERROR
        self.error_message = message
        self.matches = []

    def reset_team_availability(self) -> None:
        """Drop every member's declarations so teams can redeclare."""
        for team in self.teams:
            team.clear_declarations()
