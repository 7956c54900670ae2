"""Config loading and validation for the round-robin schedule generator."""

from datetime import date, datetime, timedelta
from pathlib import Path

import yaml

from rrsg.errors import ConfigError
from rrsg.models import Team, TimeSlot

DEFAULT_SLOT_MINUTES = 30


def parse_datetime(value) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM', 'YYYY-MM-DDTHH:MM' or a YAML datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    s = str(value).strip().replace("T", " ")
    day_part, _, time_part = s.partition(" ")
    y, mo, d = (int(p) for p in day_part.split("-"))
    h, mi = 0, 0
    if time_part:
        parts = time_part.strip().split(":")
        h = int(parts[0])
        mi = int(parts[1]) if len(parts) > 1 else 0
    return datetime(y, mo, d, h, mi)


def slice_window(start: datetime, end: datetime,
                 minutes: int = DEFAULT_SLOT_MINUTES,
                 prefix: str = "S") -> list[TimeSlot]:
    """Cut [start, end) into consecutive slots of `minutes` each.

    The last slot is truncated at `end`. Ids are S1, S2, ... in order.
    """
    if minutes <= 0:
        raise ValueError(f"slot length must be positive, got {minutes}")
    slots = []
    step = timedelta(minutes=minutes)
    current = start
    while current < end:
        slot_end = min(current + step, end)
        slots.append(TimeSlot(f"{prefix}{len(slots) + 1}", current, slot_end))
        current = slot_end
    return slots


def _slot_bounds(sd: dict, label: str, errors: list[str]):
    """Parse start/end of a slot or window, recording problems in errors."""
    missing = [k for k in ("start", "end") if sd.get(k) is None]
    if missing:
        errors.append(f"{label} is missing {' and '.join(missing)}")
        return None
    try:
        start = parse_datetime(sd["start"])
        end = parse_datetime(sd["end"])
    except ValueError:
        errors.append(
            f"{label} has an unreadable time: start={sd['start']!r} end={sd['end']!r}"
        )
        return None
    if end <= start:
        errors.append(f"{label} ends at {end} before it starts at {start}")
        return None
    return start, end


def _load_slots(raw_slots, errors: list[str]) -> list[TimeSlot]:
    if isinstance(raw_slots, dict):
        bounds = _slot_bounds(raw_slots, "Slot window", errors)
        try:
            minutes = int(raw_slots.get("minutes", DEFAULT_SLOT_MINUTES))
        except (TypeError, ValueError):
            errors.append(f"Slot window minutes must be an integer, got "
                          f"{raw_slots.get('minutes')!r}")
            return []
        if minutes <= 0:
            errors.append(f"Slot window minutes must be positive, got {minutes}")
            return []
        if bounds is None:
            return []
        return slice_window(*bounds, minutes)

    slots = []
    seen = set()
    for i, sd in enumerate(raw_slots or [], 1):
        slot_id = str(sd.get("id", f"S{i}"))
        if slot_id in seen:
            errors.append(f"Slot {slot_id} defined more than once")
            continue
        bounds = _slot_bounds(sd, f"Slot {slot_id}", errors)
        if bounds is None:
            continue
        seen.add(slot_id)
        slots.append(TimeSlot(slot_id, *bounds))
    return slots


def load_config(path: str | Path) -> dict:
    """Load and validate a tournament config YAML.

    Returns dict with:
    - name: tournament name
    - quorum: members that must share a slot for their team to take it
    - slots: list[TimeSlot] in schedule order
    - teams: list[Team] in roster order

    Raises ConfigError listing every problem found.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return parse_config(raw)


def parse_config(raw: dict) -> dict:
    """Validate an already-parsed config mapping (see load_config)."""
    errors = []

    tournament = raw.get("tournament", {}) or {}
    name = tournament.get("name", "")
    quorum = tournament.get("quorum")
    if quorum is None:
        errors.append("tournament.quorum is required")
        quorum = 1
    elif isinstance(quorum, bool) or not isinstance(quorum, int) or quorum < 1:
        errors.append(f"tournament.quorum must be an integer >= 1, got {quorum!r}")
        quorum = 1

    slots = _load_slots(raw.get("slots", []), errors)
    slot_ids = {s.slot_id for s in slots}

    teams: list[Team] = []
    seen_teams = set()
    raw_teams = raw.get("teams", {}) or {}
    if isinstance(raw_teams, list):
        # list form keeps duplicate names visible for validation
        entries = [(t.get("name"), t) for t in raw_teams]
    else:
        entries = list(raw_teams.items())

    for code, tdata in entries:
        if not code:
            errors.append("Team entry without a name")
            continue
        code = str(code)
        if code in seen_teams:
            errors.append(f"Team {code} appears more than once")
            continue
        seen_teams.add(code)

        team = Team(code=code)
        for member, declared in ((tdata or {}).get("members", {}) or {}).items():
            declared = [str(s) for s in (declared or [])]
            unknown = [s for s in declared if s not in slot_ids]
            if unknown:
                errors.append(
                    f"Member {member} of team {code} declared unknown slots: "
                    f"{', '.join(unknown)}"
                )
            team.declare(str(member), [s for s in declared if s in slot_ids])
        teams.append(team)

    if errors:
        raise ConfigError(errors)

    return {
        "name": name,
        "quorum": quorum,
        "slots": slots,
        "teams": teams,
    }
