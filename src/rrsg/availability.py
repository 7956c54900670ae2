"""Reduce member availability to team availability under a quorum rule."""

import logging
from collections import Counter

from rrsg.models import Team

logger = logging.getLogger(__name__)


def aggregate_members(members: dict[str, set[str]], quorum: int) -> set[str]:
    """Return the slot ids declared by at least `quorum` of the given members.

    A team with fewer members than the quorum always yields an empty set.
    Members declaring nothing simply contribute to no count.
    """
    if quorum < 1:
        raise ValueError(f"quorum must be >= 1, got {quorum}")
    if len(members) < quorum:
        return set()

    counts = Counter()
    for declared in members.values():
        counts.update(set(declared))
    return {slot_id for slot_id, count in counts.items() if count >= quorum}


def aggregate_team_availability(teams: list[Team],
                                quorum: int) -> dict[str, set[str]]:
    """Compute availability for every team; the input is never mutated."""
    availability = {}
    for team in teams:
        available = aggregate_members(team.members, quorum)
        if not available:
            logger.info("Team %s (%d members) has no slot shared by %d members",
                        team.code, team.size, quorum)
        availability[team.code] = available
    return availability


def teams_by_slot(availability: dict[str, set[str]]) -> dict[str, set[str]]:
    """Invert team -> slots into slot -> teams."""
    by_slot: dict[str, set[str]] = {}
    for team_code, slot_ids in availability.items():
        for slot_id in slot_ids:
            by_slot.setdefault(slot_id, set()).add(team_code)
    return by_slot
