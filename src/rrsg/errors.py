"""Exceptions raised by the round-robin schedule generator."""


class SchedulingError(Exception):
    """Base class for expected scheduling failures."""


class TooManyPairingsError(SchedulingError):
    """More pairings than slots: no schedule can exist whatever the availability."""

    def __init__(self, num_pairings: int, num_slots: int):
        self.num_pairings = num_pairings
        self.num_slots = num_slots
        super().__init__(
            f"{num_pairings} matches are required but only {num_slots} "
            f"timeslots are available"
        )


class ImperfectMatchingError(SchedulingError):
    """At least one pairing could not be given a slot.

    unmatched lists every (team_a, team_b) left without a slot, in pairing
    index order. blocking_pairings / blocking_slots, when present, are a set
    of pairings and the only slots they can use, with fewer slots than
    pairings.
    """

    def __init__(self, unmatched: list[tuple[str, str]], matched: int,
                 total: int,
                 blocking_pairings: list[tuple[str, str]] | None = None,
                 blocking_slots: list[str] | None = None):
        self.unmatched = list(unmatched)
        self.matched = matched
        self.total = total
        self.blocking_pairings = list(blocking_pairings or [])
        self.blocking_slots = list(blocking_slots or [])
        team_a, team_b = self.unmatched[0]
        super().__init__(
            f"{len(self.unmatched)} of {total} matches could not be scheduled "
            f"a timeslot (first unmatched: {team_a} vs {team_b})"
        )

    @property
    def pairing(self) -> tuple[str, str]:
        return self.unmatched[0]


class SchedulingCancelled(SchedulingError):
    """The caller asked the matching engine to stop; nothing is returned."""

    def __init__(self, phases_completed: int):
        self.phases_completed = phases_completed
        super().__init__(
            f"Schedule generation cancelled after {phases_completed} "
            f"matching phases"
        )


class GenerationInProgressError(SchedulingError):
    """A generation run is already in flight for this schedule."""


class ConfigError(ValueError):
    """Tournament config failed validation; errors holds every problem found."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(
            "Config validation errors:\n" + "\n".join(f"  {e}" for e in errors)
        )
