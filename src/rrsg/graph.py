"""Pairing enumeration and the pairing/slot compatibility graph.

Pairings are numbered by walking team roster indices i then j > i:
(0,1), (0,2), ..., (0,n-1), (1,2), ... The numbering is computed
arithmetically so it never depends on container iteration order.
Left vertices are pairing indices [0, L), right vertices are slot
positions [0, m).
"""

import logging
from dataclasses import dataclass, field

from rrsg.models import Pairing, TimeSlot

logger = logging.getLogger(__name__)


def pairing_count(num_teams: int) -> int:
    """C(n, 2); zero for fewer than two teams."""
    if num_teams < 2:
        return 0
    return num_teams * (num_teams - 1) // 2


def pairing_index(i: int, j: int, num_teams: int) -> int:
    """Index of roster pair (i, j), i < j, in the fixed enumeration."""
    if not 0 <= i < j < num_teams:
        raise ValueError(f"invalid pair ({i}, {j}) for {num_teams} teams")
    # pairs starting before row i: (n-1) + (n-2) + ... + (n-i)
    return i * (2 * num_teams - i - 1) // 2 + (j - i - 1)


def pairing_from_index(index: int, num_teams: int) -> tuple[int, int]:
    """Inverse of pairing_index."""
    if not 0 <= index < pairing_count(num_teams):
        raise ValueError(f"pairing index {index} out of range for {num_teams} teams")
    i = 0
    row = num_teams - 1
    while index >= row:
        index -= row
        i += 1
        row -= 1
    return i, i + 1 + index


def enumerate_pairings(teams: list[str]) -> list[Pairing]:
    """All pairings of the roster, positioned at their own index."""
    n = len(teams)
    pairings = []
    for k in range(pairing_count(n)):
        i, j = pairing_from_index(k, n)
        pairings.append(Pairing(k, teams[i], teams[j]))
    return pairings


@dataclass
class BipartiteGraph:
    """Adjacency lists from pairing index to slot positions."""
    num_pairings: int
    num_slots: int
    adj: list[list[int]] = field(default_factory=list)

    def __post_init__(self):
        if not self.adj:
            self.adj = [[] for _ in range(self.num_pairings)]

    def add_edge(self, pairing: int, slot: int) -> None:
        self.adj[pairing].append(slot)

    def neighbors(self, pairing: int) -> list[int]:
        return self.adj[pairing]

    @property
    def edge_count(self) -> int:
        return sum(len(slots) for slots in self.adj)


def build_compatibility_graph(teams: list[str],
                              availability: dict[str, set[str]],
                              slots: list[TimeSlot]) -> BipartiteGraph:
    """Connect each pairing to every slot where both of its teams are available.

    Slots are added in list order so the adjacency (and therefore the matching
    found later) is reproducible. Pairings with no common slot get no edges;
    detecting that is left to the matching phase.
    """
    n = len(teams)
    graph = BipartiteGraph(num_pairings=pairing_count(n), num_slots=len(slots))

    for i in range(n):
        avail_i = availability.get(teams[i], set())
        for j in range(i + 1, n):
            common = avail_i & availability.get(teams[j], set())
            if not common:
                continue
            p = pairing_index(i, j, n)
            for k, slot in enumerate(slots):
                if slot.slot_id in common:
                    graph.add_edge(p, k)

    logger.debug("Compatibility graph: %d pairings, %d slots, %d edges",
                 graph.num_pairings, graph.num_slots, graph.edge_count)
    return graph
