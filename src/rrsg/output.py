"""Output formatters for the round-robin schedule generator."""

import csv
from io import StringIO
from pathlib import Path

from rrsg.errors import (
    ImperfectMatchingError, SchedulingError, TooManyPairingsError,
)
from rrsg.models import Match


def _fmt_time(m: Match) -> str:
    return f"{m.slot_start:%Y-%m-%d %H:%M}-{m.slot_end:%H:%M}"


def format_schedule(matches: list[Match], teams: list[str],
                    title: str = "") -> str:
    """Format schedule as human-readable text, by slot then per team."""
    ordered = sorted(matches, key=lambda m: (m.slot_start, m.slot_id))

    lines = []
    lines.append("=" * 70)
    lines.append((title or "ROUND-ROBIN SCHEDULE").upper())
    lines.append("=" * 70)

    for m in ordered:
        lines.append(
            f"  {_fmt_time(m)}  [{m.slot_id:>4}]  {m.team_a:<12} vs {m.team_b}"
        )

    lines.append("\n" + "=" * 70)
    lines.append("PER-TEAM SCHEDULE")
    lines.append("=" * 70)
    for t in teams:
        team_matches = [m for m in ordered if m.involves(t)]
        lines.append(f"\n{t} ({len(team_matches)} matches)")
        for m in team_matches:
            lines.append(f"  {_fmt_time(m)}  vs {m.opponent(t)}")

    return "\n".join(lines) + "\n"


def format_csv(matches: list[Match]) -> str:
    """Columns: Match, Slot, Start, End, Team A, Team B."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Match", "Slot", "Start", "End", "Team A", "Team B"])
    ordered = sorted(matches, key=lambda m: (m.slot_start, m.slot_id))
    for i, m in enumerate(ordered, 1):
        writer.writerow([
            i, m.slot_id,
            m.slot_start.isoformat(timespec="minutes"),
            m.slot_end.isoformat(timespec="minutes"),
            m.team_a, m.team_b,
        ])
    return output.getvalue()


def format_failure(error: SchedulingError) -> str:
    """Explain a scheduling failure and what to change."""
    lines = [f"Schedule generation failed: {error}"]
    if isinstance(error, TooManyPairingsError):
        lines.append(
            f"  {error.num_pairings} pairings need a slot each; add at least "
            f"{error.num_pairings - error.num_slots} more timeslots."
        )
    elif isinstance(error, ImperfectMatchingError):
        lines.append(f"  Scheduled {error.matched} of {error.total} pairings.")
        lines.append("  Unmatched pairings:")
        for a, b in error.unmatched:
            lines.append(f"    {a} vs {b}")
        if error.blocking_pairings:
            lines.append(
                f"  These {len(error.blocking_pairings)} pairings share only "
                f"{len(error.blocking_slots)} usable slots "
                f"({', '.join(error.blocking_slots) or 'none'}):"
            )
            for a, b in error.blocking_pairings:
                lines.append(f"    {a} vs {b}")
        lines.append("  Ask the teams involved to redeclare their availability.")
    return "\n".join(lines)


def write_schedule(matches: list[Match], teams: list[str],
                   output_prefix: str = "output", title: str = ""):
    """Write schedule.txt and schedule.csv into {output_prefix}/."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(matches, teams, title=title))
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_csv(matches))
    print(f"Written: {csv_path}")
