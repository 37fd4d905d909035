#!/usr/bin/env python
"""
Drop-time Simulation Script.

Usage:
    # Every archetype, 10000 trials each
    python simulate_drops.py

    # A couple of archetypes with a fixed seed
    python simulate_drops.py --archetype pirate --archetype hill_giant --seed 7

    # List archetypes
    python simulate_drops.py --list
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dropsim.api.config import settings
from dropsim.combat.simulation import DropSimulator, format_report
from dropsim.core.constants import RING_OF_WEALTH
from dropsim.data.loaders import get_archetype_by_id, load_archetypes, load_default_player


def main():
    parser = argparse.ArgumentParser(
        description="Estimate hours to a rare drop by Monte Carlo simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Simulate pirates with a ring of wealth:
        python simulate_drops.py --archetype pirate --ring-of-wealth

    Run trials on 8 threads:
        python simulate_drops.py --parallel --workers 8
        """,
    )

    parser.add_argument(
        "--archetype",
        action="append",
        default=[],
        metavar="ID",
        help="Archetype id to simulate (repeatable, default: all)",
    )
    parser.add_argument(
        "--trials",
        type=int,
        default=settings.DEFAULT_TRIAL_COUNT,
        help=f"Trials per archetype (default: {settings.DEFAULT_TRIAL_COUNT})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.DEFAULT_SEED,
        help="Random seed (default: unseeded)",
    )
    parser.add_argument(
        "--target",
        type=str,
        default=settings.TARGET_ITEM,
        help=f"Item to farm (default: {settings.TARGET_ITEM})",
    )
    parser.add_argument(
        "--no-members",
        action="store_true",
        help="Simulate a free-to-play player",
    )
    parser.add_argument(
        "--ring-of-wealth",
        action="store_true",
        help="Player holds a ring of wealth",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run trials in parallel (changes the random stream)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Parallel workers (default: 4)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        help=f"Logging level (default: {settings.LOG_LEVEL})",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List archetypes and exit",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for archetype in load_archetypes():
            print(f"{archetype.id:<16} {archetype.name:<16} {archetype.chance}/{archetype.outof}")
        return

    if args.trials < 1:
        parser.error("--trials must be positive")

    archetypes = []
    for archetype_id in args.archetype:
        archetype = get_archetype_by_id(archetype_id)
        if archetype is None:
            parser.error(f"unknown archetype: {archetype_id}")
        archetypes.append(archetype)
    if not archetypes:
        archetypes = load_archetypes()

    profile = load_default_player()
    if args.ring_of_wealth:
        profile = profile.with_items(RING_OF_WEALTH)

    simulator = DropSimulator(
        base_seed=args.seed,
        target_item=args.target,
        is_members=False if args.no_members else settings.IS_MEMBERS,
        max_ticks=settings.MAX_TRIAL_TICKS,
    )

    print("=" * 60)
    print(f"Target: {args.target}")
    print(f"Trials per archetype: {args.trials:,}")
    print(f"Seed: {args.seed}")
    print("=" * 60)

    for archetype in archetypes:
        result = simulator.simulate(
            archetype,
            profile,
            iterations=args.trials,
            parallel=args.parallel,
            max_workers=args.workers,
        )
        print(format_report(result))


if __name__ == "__main__":
    main()
