"""Independent verification of a generated round-robin schedule.

Checks a match list against the roster, the slots and the aggregated team
availability without trusting anything the scheduler computed.
"""

from collections import defaultdict

from rrsg.models import Match, TimeSlot


def validate_schedule(matches: list[Match], teams: list[str],
                      slots: list[TimeSlot],
                      availability: dict[str, set[str]]) -> dict:
    """Validate a schedule.

    Returns dict with:
    - valid: bool
    - errors: list of violations
    - matchup_counts: dict of (team_a, team_b) -> count, sorted pair keys
    - games_per_team: dict of team -> match count
    """
    errors = []
    slots_by_id = {s.slot_id: s for s in slots}
    roster = set(teams)
    matchup_counts: dict[tuple[str, str], int] = defaultdict(int)
    games_per_team: dict[str, int] = {t: 0 for t in teams}
    slot_use: dict[str, list[Match]] = defaultdict(list)

    for m in matches:
        label = f"{m.team_a} vs {m.team_b}"
        if m.team_a == m.team_b:
            errors.append(f"{label}: team plays itself")
        for t in (m.team_a, m.team_b):
            if t not in roster:
                errors.append(f"{label}: {t} is not in the roster")
            else:
                games_per_team[t] += 1

        key = tuple(sorted([m.team_a, m.team_b]))
        matchup_counts[key] += 1

        slot = slots_by_id.get(m.slot_id)
        if slot is None:
            errors.append(f"{label}: unknown slot {m.slot_id!r}")
            continue
        slot_use[m.slot_id].append(m)
        if (m.slot_start, m.slot_end) != (slot.start, slot.end):
            errors.append(f"{label}: times do not match slot {m.slot_id}")
        for t in (m.team_a, m.team_b):
            if m.slot_id not in availability.get(t, set()):
                errors.append(f"{label}: {t} is not available at {m.slot_id}")

    for slot_id, used in slot_use.items():
        if len(used) > 1:
            errors.append(f"Slot {slot_id} used by {len(used)} matches")

    # Every pair plays exactly once
    for i, t1 in enumerate(teams):
        for t2 in teams[i + 1:]:
            key = tuple(sorted([t1, t2]))
            count = matchup_counts.get(key, 0)
            if count != 1:
                errors.append(f"{t1} vs {t2}: played {count} times (expected 1)")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": dict(matchup_counts),
        "games_per_team": games_per_team,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    return "\n".join(lines)
