"""Tests for availability.py: quorum aggregation."""

import pytest

from rrsg.availability import (
    aggregate_members, aggregate_team_availability, teams_by_slot,
)
from rrsg.models import Team


class TestAggregateMembers:
    def test_quorum_boundary(self):
        # q=2, three members: one declares X, two declare Y
        members = {"m1": {"X", "Y"}, "m2": {"Y"}, "m3": set()}
        assert aggregate_members(members, 2) == {"Y"}

    def test_count_one_below_quorum_is_unavailable(self):
        members = {"m1": {"S1"}, "m2": {"S1"}, "m3": {"S2"}}
        assert "S1" not in aggregate_members(members, 3)

    def test_count_equal_to_quorum_is_available(self):
        members = {"m1": {"S1"}, "m2": {"S1"}, "m3": {"S1"}}
        assert aggregate_members(members, 3) == {"S1"}

    def test_quorum_one_is_union(self):
        members = {"m1": {"S1"}, "m2": {"S2", "S3"}}
        assert aggregate_members(members, 1) == {"S1", "S2", "S3"}

    def test_fewer_members_than_quorum(self):
        members = {"m1": {"S1"}, "m2": {"S1"}}
        assert aggregate_members(members, 3) == set()

    def test_member_with_no_slots(self):
        members = {"m1": set(), "m2": set()}
        assert aggregate_members(members, 1) == set()

    def test_duplicate_declarations_count_once(self):
        members = {"m1": ["S1", "S1"], "m2": []}
        assert aggregate_members(members, 2) == set()

    def test_invalid_quorum(self):
        with pytest.raises(ValueError):
            aggregate_members({"m1": {"S1"}}, 0)

    def test_input_not_mutated(self):
        members = {"m1": {"S1"}, "m2": {"S2"}}
        aggregate_members(members, 1)
        assert members == {"m1": {"S1"}, "m2": {"S2"}}


class TestAggregateTeams:
    def test_per_team(self):
        teams = [
            Team("A", {"a1": {"X", "Y"}, "a2": {"Y"}, "a3": set()}),
            Team("B", {"b1": {"X"}, "b2": {"X"}}),
        ]
        avail = aggregate_team_availability(teams, 2)
        assert avail == {"A": {"Y"}, "B": {"X"}}

    def test_team_without_members(self):
        avail = aggregate_team_availability([Team("A")], 1)
        assert avail == {"A": set()}


class TestTeamsBySlot:
    def test_inverse(self):
        avail = {"A": {"S1", "S2"}, "B": {"S2"}, "C": set()}
        assert teams_by_slot(avail) == {"S1": {"A"}, "S2": {"A", "B"}}
