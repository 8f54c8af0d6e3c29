import argparse
import logging
from typing import List, Optional

from arkham_calc import (
    DEFAULT_PRECISION,
    MAX_DICE,
    MAX_SIMULATIONS,
    MIN_DICE,
    DiceRoller,
    StatusMode,
    SuccessCheck,
    format_chance,
    success_table,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='arkham-calc',
        description='Chance of rolling at least N successes on a pool of d6s'
    )
    parser.add_argument('dice', type=int, help=f'Number of dice ({MIN_DICE}-{MAX_DICE})')
    parser.add_argument('successes', type=int, help=f'Successes needed ({MIN_DICE}-{MAX_DICE})')
    parser.add_argument('--status', type=str, default=StatusMode.NORMAL.value,
                        choices=[s.value for s in StatusMode],
                        help='Blessed or cursed? (default: normal)')
    parser.add_argument('--precision', type=int, default=DEFAULT_PRECISION,
                        help='Decimal places in the percentage')
    parser.add_argument('--table', action='store_true',
                        help='Also print the chance of at least k successes for every k')
    parser.add_argument('--simulate', type=int, default=None, metavar='TRIALS',
                        help='Cross-check the exact chance with TRIALS simulated rolls')
    parser.add_argument('--roll', action='store_true',
                        help='Also roll the dice once and show which ones succeeded')
    parser.add_argument('--seed', type=int, default=None, help='Seed for --simulate and --roll')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def validate_bounds(parser: argparse.ArgumentParser, args: argparse.Namespace):
    """Keep inputs in the same range the calculator's spinners allow"""
    if not MIN_DICE <= args.dice <= MAX_DICE:
        parser.error(f"Number of dice must be between {MIN_DICE} and {MAX_DICE}")
    if not MIN_DICE <= args.successes <= MAX_DICE:
        parser.error(f"Successes needed must be between {MIN_DICE} and {MAX_DICE}")
    if args.precision < 0:
        parser.error("Precision cannot be negative")
    if args.simulate is not None and not 1 <= args.simulate <= MAX_SIMULATIONS:
        parser.error(f"Simulated rolls must be between 1 and {MAX_SIMULATIONS}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT
    )
    validate_bounds(parser, args)

    check = SuccessCheck(dice=args.dice, successes_needed=args.successes, status=args.status)
    chance = check.chance()
    faces = ", ".join(str(face) for face in check.hit_faces())

    print(f"Rolling {check.dice} dice, {check.successes_needed} successes needed "
          f"({check.status.value}: successes on {faces})")
    print(f"Chance of Success: {format_chance(chance, args.precision)}")

    if args.table:
        print("\nAt least  Chance")
        for k, probability in success_table(check.dice, check.status):
            print(f"{k:>8}  {format_chance(probability, args.precision)}")

    roller = DiceRoller(seed=args.seed)

    if args.roll:
        result = roller.roll(check.dice, check.status)
        outcome = "passed" if result.num_successes >= check.successes_needed else "failed"
        print(f"\nSample roll: {' '.join(str(die) for die in result.dice)} "
              f"-> {result.num_successes} successes ({outcome})")

    if args.simulate is not None:
        try:
            estimate = roller.simulate_success_chance(
                check.dice, check.successes_needed, check.status, trials=args.simulate
            )
        except ValueError as e:
            parser.error(str(e))
        deviation = (estimate - chance) * 100
        print(f"Simulated ({args.simulate} rolls): {format_chance(estimate, args.precision)} "
              f"({deviation:+.{args.precision}f} points)")

    logger.debug("Finished %s", check)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
