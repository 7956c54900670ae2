"""Schedule assembly for the round-robin schedule generator.

Three steps:
1. Structural check: C(n,2) pairings must fit in m slots.
2. Build the pairing/slot compatibility graph and run Hopcroft-Karp.
3. Turn a perfect matching into Match records, or report which pairing
   could not be placed.

generate_schedule is pure. run_generation wraps it for a ScheduleState,
recording success or failure and asking for availability to be reset
when the input cannot be scheduled.
"""

import logging
from typing import Callable

from rrsg.availability import aggregate_team_availability
from rrsg.errors import (
    GenerationInProgressError, ImperfectMatchingError, SchedulingCancelled,
    TooManyPairingsError,
)
from rrsg.graph import (
    BipartiteGraph, build_compatibility_graph, enumerate_pairings,
    pairing_count,
)
from rrsg.matching import Matching, hall_violator, hopcroft_karp
from rrsg.models import Match, ScheduleState, Team, TimeSlot

logger = logging.getLogger(__name__)


def check_capacity(num_teams: int, num_slots: int) -> int:
    """Return the number of pairings, raising if they cannot all fit."""
    num_pairings = pairing_count(num_teams)
    if num_pairings > num_slots:
        raise TooManyPairingsError(num_pairings, num_slots)
    return num_pairings


def assemble_matches(teams: list[str], slots: list[TimeSlot],
                     graph: BipartiteGraph, matching: Matching) -> list[Match]:
    """Map a matching back to Match records, one per pairing in index order."""
    pairings = enumerate_pairings(teams)

    def names(p):
        return pairings[p].team_a, pairings[p].team_b

    if not matching.is_perfect:
        unmatched = matching.unmatched()
        logger.info("No slot for pairing %s", pairings[unmatched[0]])
        blocking_pairs, blocking_slots = hall_violator(graph, matching, unmatched[0])
        raise ImperfectMatchingError(
            unmatched=[names(p) for p in unmatched],
            matched=matching.size,
            total=graph.num_pairings,
            blocking_pairings=[names(p) for p in blocking_pairs],
            blocking_slots=[slots[s].slot_id for s in blocking_slots],
        )

    matches = []
    for p, s in matching.edges():
        slot = slots[s]
        matches.append(Match(
            team_a=pairings[p].team_a,
            team_b=pairings[p].team_b,
            slot_start=slot.start,
            slot_end=slot.end,
            slot_id=slot.slot_id,
        ))
    return matches


def generate_schedule(teams: list[str], slots: list[TimeSlot],
                      availability: dict[str, set[str]],
                      should_stop: Callable[[], bool] | None = None,
                      ) -> list[Match]:
    """Give every pairing of `teams` its own slot where both teams are available.

    teams must be deduplicated; availability maps team code to slot ids.
    Raises TooManyPairingsError before any graph work when there are more
    pairings than slots, ImperfectMatchingError when no full assignment
    exists, and SchedulingCancelled if should_stop fires between phases.
    Never returns a partial schedule.
    """
    num_pairings = check_capacity(len(teams), len(slots))
    if num_pairings == 0:
        return []

    graph = build_compatibility_graph(teams, availability, slots)
    matching = hopcroft_karp(graph, should_stop=should_stop)
    logger.info("Matched %d of %d pairings in %d phases",
                matching.size, num_pairings, matching.phases)
    return assemble_matches(teams, slots, graph, matching)


def generate_from_members(teams: list[Team], slots: list[TimeSlot],
                          quorum: int,
                          should_stop: Callable[[], bool] | None = None,
                          ) -> list[Match]:
    """Aggregate member declarations under `quorum`, then generate."""
    availability = aggregate_team_availability(teams, quorum)
    return generate_schedule([t.code for t in teams], slots, availability,
                             should_stop=should_stop)


def run_generation(state: ScheduleState,
                   should_stop: Callable[[], bool] | None = None,
                   ) -> list[Match]:
    """Generate matches for a schedule record and update its status.

    On TooManyPairingsError or ImperfectMatchingError the error message is
    recorded and team availability is reset so teams can redeclare. On
    cancellation only the error is recorded. The exception is re-raised
    after the state is updated.
    """
    if state.is_generating:
        raise GenerationInProgressError("Schedule generation already running")

    state.begin_generation()
    try:
        matches = generate_from_members(state.teams, state.slots, state.quorum,
                                        should_stop=should_stop)
    except (TooManyPairingsError, ImperfectMatchingError) as e:
        logger.info("Schedule generation failed: %s", e)
        state.set_error(str(e))
        state.reset_team_availability()
        raise
    except SchedulingCancelled as e:
        state.set_error(str(e))
        raise
    except Exception as e:
        state.set_error(f"Unexpected error: {e}")
        raise

    state.set_success(matches)
    return matches
