#!/usr/bin/env python3
"""Round-robin schedule builder.

    rrsg [config.yaml] [-o OUTPUT_DIR] [--timeout SECONDS] [-v]

Aggregates member availability into team availability, assigns every pair
of teams its own mutually available timeslot, verifies the result and writes:
  {output}/schedule.txt   - Human-readable schedule (by slot + per team)
  {output}/schedule.csv   - One row per match

Examples:
    rrsg                          # default config.yaml
    rrsg cup.yaml -o spring2026   # alternate config and output directory
    rrsg --timeout 30 -v          # give up after 30s, show matching phases
"""

import argparse
import logging
import sys
from pathlib import Path

from rrsg.availability import aggregate_team_availability
from rrsg.config import load_config
from rrsg.constraints import validate_schedule, format_validation_report
from rrsg.errors import ConfigError, SchedulingError
from rrsg.graph import pairing_count
from rrsg.matching import deadline_after
from rrsg.models import ScheduleState
from rrsg.output import format_failure, format_schedule, write_schedule
from rrsg.scheduler import run_generation


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Round-robin schedule builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Schedule generated and verified
  1  Config error, scheduling failure, or verification failure
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Abandon matching after this many seconds"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log matching phases"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(e)
        sys.exit(1)

    teams = config["teams"]
    slots = config["slots"]
    quorum = config["quorum"]
    codes = [t.code for t in teams]
    print(f"  Teams: {len(teams)}  Pairings: {pairing_count(len(teams))}  "
          f"Slots: {len(slots)}  Quorum: {quorum}")

    # run_generation clears declarations on failure; verify against this view
    availability = aggregate_team_availability(teams, quorum)

    state = ScheduleState(teams=teams, slots=slots, quorum=quorum)
    should_stop = deadline_after(args.timeout) if args.timeout is not None else None

    print("Generating schedule...")
    try:
        matches = run_generation(state, should_stop=should_stop)
    except SchedulingError as e:
        print(format_failure(e))
        sys.exit(1)

    print("\nValidating...")
    result = validate_schedule(matches, codes, slots, availability)
    print(format_validation_report(result))

    print("\n" + format_schedule(matches, codes, title=config["name"]))

    print("Writing output files...")
    write_schedule(matches, codes, output_prefix=args.output_prefix,
                   title=config["name"])

    if not result["valid"]:
        print(f"\nSchedule has {len(result['errors'])} constraint violations.")
        sys.exit(1)
    print(f"\nSchedule generated successfully: {len(matches)} matches.")


if __name__ == "__main__":
    main()
