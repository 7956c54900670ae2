"""Maximum bipartite matching (Hopcroft-Karp) over the compatibility graph.

Each phase runs a breadth-first search from every free pairing to layer the
graph by shortest alternating distance, then a depth-first search from each
free pairing that only follows edges one layer deeper. The paths found in a
phase are vertex-disjoint; a slot taken by one path is matched and cannot be
claimed again in the same phase. The loop stops when no free slot is
reachable, at which point the matching is maximum.

Unmatched vertices are represented by None, never by a slot or pairing index.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional

from rrsg.errors import SchedulingCancelled
from rrsg.graph import BipartiteGraph

logger = logging.getLogger(__name__)


@dataclass
class Matching:
    """Result of hopcroft_karp: mates in both directions."""
    pair_slot: list[Optional[int]]      # pairing index -> slot position
    slot_pair: list[Optional[int]]      # slot position -> pairing index
    phases: int = 0

    @property
    def size(self) -> int:
        return sum(1 for s in self.pair_slot if s is not None)

    @property
    def is_perfect(self) -> bool:
        """True when every pairing has a slot."""
        return all(s is not None for s in self.pair_slot)

    def mate(self, pairing: int) -> Optional[int]:
        return self.pair_slot[pairing]

    def unmatched(self) -> list[int]:
        return [p for p, s in enumerate(self.pair_slot) if s is None]

    def edges(self) -> list[tuple[int, int]]:
        return [(p, s) for p, s in enumerate(self.pair_slot) if s is not None]


def deadline_after(seconds: float) -> Callable[[], bool]:
    """A should_stop callable that turns true once `seconds` have elapsed."""
    deadline = time.monotonic() + seconds
    return lambda: time.monotonic() >= deadline


def _layer(graph: BipartiteGraph, pair_slot, slot_pair):
    """BFS from all free pairings.

    Returns (dist, free_layer): dist[p] is the layer of pairing p (None when
    unreached) and free_layer is the layer at which a free slot is first
    reached. Returns None when no free slot is reachable.
    """
    dist: list[Optional[int]] = [None] * graph.num_pairings
    queue = deque()
    for p, s in enumerate(pair_slot):
        if s is None:
            dist[p] = 0
            queue.append(p)

    free_layer = None
    while queue:
        p = queue.popleft()
        if free_layer is not None and dist[p] >= free_layer:
            continue
        for s in graph.neighbors(p):
            q = slot_pair[s]
            if q is None:
                if free_layer is None:
                    free_layer = dist[p] + 1
            elif dist[q] is None:
                dist[q] = dist[p] + 1
                queue.append(q)

    if free_layer is None:
        return None
    return dist, free_layer


def _augment(root: int, graph: BipartiteGraph, pair_slot, slot_pair,
             dist, free_layer: int) -> bool:
    """Find and apply one layered augmenting path starting at pairing root.

    Iterative so long alternating paths do not hit the recursion limit.
    Pairings that lead nowhere are dropped from the layering (dist set to
    None) so later searches in the same phase skip them.
    """
    stack = [(root, iter(graph.neighbors(root)))]
    via: list[int] = []  # via[k] is the slot taken from stack[k]

    while stack:
        p, edges = stack[-1]
        advanced = False
        for s in edges:
            q = slot_pair[s]
            if q is None:
                if dist[p] + 1 == free_layer:
                    via.append(s)
                    for (left, _), right in zip(stack, via):
                        pair_slot[left] = right
                        slot_pair[right] = left
                    return True
            elif dist[q] is not None and dist[q] == dist[p] + 1:
                via.append(s)
                stack.append((q, iter(graph.neighbors(q))))
                advanced = True
                break
        if not advanced:
            dist[p] = None
            stack.pop()
            if via:
                via.pop()
    return False


def hopcroft_karp(graph: BipartiteGraph,
                  should_stop: Callable[[], bool] | None = None) -> Matching:
    """Compute a maximum-cardinality matching of pairings to slots.

    should_stop is polled before every phase; if it returns true the run is
    abandoned with SchedulingCancelled and no matching is returned.
    Deterministic for a given graph.
    """
    pair_slot: list[Optional[int]] = [None] * graph.num_pairings
    slot_pair: list[Optional[int]] = [None] * graph.num_slots
    phases = 0

    while True:
        if should_stop is not None and should_stop():
            raise SchedulingCancelled(phases)
        layered = _layer(graph, pair_slot, slot_pair)
        if layered is None:
            break
        dist, free_layer = layered
        phases += 1
        found = 0
        for p in range(graph.num_pairings):
            if pair_slot[p] is None and dist[p] is not None:
                if _augment(p, graph, pair_slot, slot_pair, dist, free_layer):
                    found += 1
        logger.debug("Phase %d: path length %d, %d augmenting paths",
                     phases, 2 * free_layer - 1, found)

    matching = Matching(pair_slot=pair_slot, slot_pair=slot_pair, phases=phases)
    logger.debug("Matching size %d of %d after %d phases",
                 matching.size, graph.num_pairings, phases)
    return matching


def hall_violator(graph: BipartiteGraph, matching: Matching,
                  pairing: int) -> tuple[list[int], list[int]]:
    """Pairings and slots showing why an unmatched pairing cannot be placed.

    Collects everything reachable from the unmatched pairing along alternating
    paths. With a maximum matching every slot reached is matched to a pairing
    that is also reached, so the returned slots are exactly the neighbourhood
    of the returned pairings and there is one fewer slot than pairings.
    """
    if matching.mate(pairing) is not None:
        raise ValueError(f"pairing {pairing} is matched")

    seen_pairs = {pairing}
    seen_slots = set()
    queue = deque([pairing])
    while queue:
        p = queue.popleft()
        for s in graph.neighbors(p):
            if s in seen_slots:
                continue
            seen_slots.add(s)
            q = matching.slot_pair[s]
            if q is not None and q not in seen_pairs:
                seen_pairs.add(q)
                queue.append(q)
    return sorted(seen_pairs), sorted(seen_slots)
