"""Tests for matching.py: Hopcroft-Karp and Hall witnesses."""

import random

import pytest

from rrsg.errors import SchedulingCancelled
from rrsg.graph import BipartiteGraph
from rrsg.matching import deadline_after, hall_violator, hopcroft_karp


def _graph(num_left, num_right, adj):
    return BipartiteGraph(num_pairings=num_left, num_slots=num_right,
                          adj=[list(a) for a in adj])


def _brute_force_max(graph):
    """Largest matching size by exhaustive search (small graphs only)."""
    best = 0

    def search(p, used, size):
        nonlocal best
        if size + (graph.num_pairings - p) <= best:
            return
        if p == graph.num_pairings:
            best = max(best, size)
            return
        for s in graph.adj[p]:
            if s not in used:
                used.add(s)
                search(p + 1, used, size + 1)
                used.remove(s)
        search(p + 1, used, size)

    search(0, set(), 0)
    return best


def _assert_valid(graph, matching):
    slots_used = set()
    for p, s in matching.edges():
        assert s in graph.adj[p]
        assert s not in slots_used
        slots_used.add(s)
        assert matching.slot_pair[s] == p
    for s, p in enumerate(matching.slot_pair):
        if p is not None:
            assert matching.pair_slot[p] == s


class TestHopcroftKarp:
    def test_unique_perfect_matching(self):
        # p0-{s0}, p1-{s0,s1}, p2-{s1,s2}: only p0-s0, p1-s1, p2-s2
        graph = _graph(3, 3, [[0], [0, 1], [1, 2]])
        matching = hopcroft_karp(graph)
        assert matching.pair_slot == [0, 1, 2]
        assert matching.is_perfect

    def test_needs_augmenting_path(self):
        # Greedy in slot order gives p0-s0 and leaves p1 stuck.
        graph = _graph(2, 2, [[0, 1], [0]])
        matching = hopcroft_karp(graph)
        assert matching.pair_slot == [1, 0]
        assert matching.is_perfect

    def test_long_alternating_path(self):
        # p_k prefers s_k, last pairing only fits s_0: forces one long path
        n = 50
        adj = [[k, k + 1] for k in range(n - 1)] + [[0]]
        graph = _graph(n, n, adj)
        matching = hopcroft_karp(graph)
        assert matching.is_perfect
        _assert_valid(graph, matching)

    def test_isolated_pairing(self):
        graph = _graph(3, 3, [[0], [], [1, 2]])
        matching = hopcroft_karp(graph)
        assert matching.size == 2
        assert matching.mate(1) is None
        assert matching.unmatched() == [1]
        assert not matching.is_perfect

    def test_unmatched_is_none_not_zero(self):
        graph = _graph(2, 1, [[0], [0]])
        matching = hopcroft_karp(graph)
        assert matching.size == 1
        assert None in matching.pair_slot

    def test_empty_graph(self):
        matching = hopcroft_karp(_graph(0, 0, []))
        assert matching.size == 0
        assert matching.is_perfect
        assert matching.phases == 0

    def test_no_slots(self):
        matching = hopcroft_karp(_graph(2, 0, [[], []]))
        assert matching.unmatched() == [0, 1]

    def test_complete_graph(self):
        n = 60
        graph = _graph(n, n, [list(range(n)) for _ in range(n)])
        matching = hopcroft_karp(graph)
        assert matching.is_perfect
        _assert_valid(graph, matching)

    def test_deterministic(self):
        rng = random.Random(5)
        adj = [[s for s in range(12) if rng.random() < 0.3] for _ in range(10)]
        graph = _graph(10, 12, adj)
        assert hopcroft_karp(graph).pair_slot == hopcroft_karp(graph).pair_slot

    @pytest.mark.parametrize("seed", range(40))
    def test_maximum_against_brute_force(self, seed):
        rng = random.Random(seed)
        left = rng.randint(1, 7)
        right = rng.randint(1, 7)
        density = rng.choice([0.15, 0.3, 0.5])
        adj = [[s for s in range(right) if rng.random() < density]
               for _ in range(left)]
        graph = _graph(left, right, adj)
        matching = hopcroft_karp(graph)
        _assert_valid(graph, matching)
        assert matching.size == _brute_force_max(graph)


class TestCancellation:
    def test_stop_before_first_phase(self):
        graph = _graph(1, 1, [[0]])
        with pytest.raises(SchedulingCancelled) as exc:
            hopcroft_karp(graph, should_stop=lambda: True)
        assert exc.value.phases_completed == 0

    def test_stop_between_phases(self):
        calls = []

        def stop():
            calls.append(1)
            return len(calls) > 1

        graph = _graph(2, 2, [[0, 1], [0]])
        with pytest.raises(SchedulingCancelled) as exc:
            hopcroft_karp(graph, should_stop=stop)
        assert exc.value.phases_completed == 1

    def test_never_stop(self):
        graph = _graph(2, 2, [[0, 1], [0]])
        assert hopcroft_karp(graph, should_stop=lambda: False).is_perfect

    def test_deadline_after(self):
        assert deadline_after(0)()
        assert not deadline_after(3600)()


class TestHallViolator:
    def test_two_pairings_one_slot(self):
        graph = _graph(3, 3, [[0], [0], [1, 2]])
        matching = hopcroft_karp(graph)
        unmatched = matching.unmatched()
        assert len(unmatched) == 1
        pairs, slots = hall_violator(graph, matching, unmatched[0])
        assert pairs == [0, 1]
        assert slots == [0]

    def test_isolated_pairing(self):
        graph = _graph(2, 1, [[0], []])
        matching = hopcroft_karp(graph)
        assert hall_violator(graph, matching, 1) == ([1], [])

    @pytest.mark.parametrize("seed", range(20))
    def test_witness_violates_hall(self, seed):
        rng = random.Random(100 + seed)
        left = rng.randint(3, 8)
        right = rng.randint(2, left)
        adj = [[s for s in range(right) if rng.random() < 0.35]
               for _ in range(left)]
        graph = _graph(left, right, adj)
        matching = hopcroft_karp(graph)
        for p in matching.unmatched():
            pairs, slots = hall_violator(graph, matching, p)
            assert p in pairs
            assert len(slots) < len(pairs)
            neighbourhood = {s for q in pairs for s in graph.adj[q]}
            assert neighbourhood == set(slots)

    def test_matched_pairing_rejected(self):
        graph = _graph(1, 1, [[0]])
        matching = hopcroft_karp(graph)
        with pytest.raises(ValueError):
            hall_violator(graph, matching, 0)
