import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

# Constants
MIN_DICE = 1
MAX_DICE = 20
DICE_MIN = 1
DICE_MAX = 6
DEFAULT_PRECISION = 2
DEFAULT_SIMULATIONS = 100_000
MAX_SIMULATIONS = 1_000_000


class StatusMode(Enum):
    """Status modifiers that change how many faces of a die count as a success"""
    NORMAL = "normal"
    BLESSED = "blessed"
    CURSED = "cursed"

    @classmethod
    def parse(cls, value: Union["StatusMode", str]) -> "StatusMode":
        """Resolve a StatusMode from a member or a case-insensitive name. Raises ValueError if unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for status in cls:
                if status.value == key:
                    return status
        raise ValueError(f"Unknown status: {value!r}")


# One success in every N rolls of a d6
SUCCESS_DENOMINATORS = {
    StatusMode.NORMAL: 3,
    StatusMode.BLESSED: 2,
    StatusMode.CURSED: 6,
}


def success_denominator(status: Union[StatusMode, str]) -> int:
    """Return N where a single die succeeds once in N rolls under the given status"""
    return SUCCESS_DENOMINATORS[StatusMode.parse(status)]


def success_faces(status: Union[StatusMode, str]) -> Tuple[int, ...]:
    """Faces of a d6 that count as a success under the given status"""
    hits = DICE_MAX // success_denominator(status)
    return tuple(range(DICE_MAX - hits + 1, DICE_MAX + 1))


# Combinatorics
def n_choose_k(n: int, k: int) -> int:
    """
    Number of ways to choose k items out of n, as an exact integer.

    Only one full factorial is computed: the larger of k and (n - k) is
    cancelled out of n! by multiplying the integers above it up to n.

    Raises ValueError unless 0 <= k <= n.
    """
    if n < 0 or k < 0 or k > n:
        raise ValueError(f"n_choose_k requires 0 <= k <= n, got n={n}, k={k}")

    if k == 0 or k == n:
        return 1

    larger = max(k, n - k)
    smaller = min(k, n - k)
    numerator = math.prod(range(larger + 1, n + 1))
    denominator = math.factorial(smaller)
    return numerator // denominator


def _check_tail_args(dice: int, successes_needed: int):
    if dice < 0:
        raise ValueError(f"Number of dice cannot be negative: {dice}")
    if successes_needed < 0 or successes_needed > dice:
        raise ValueError(
            f"Successes needed must be between 0 and {dice}, got {successes_needed}"
        )


def _binomial_term(dice: int, count: int, chance: float) -> float:
    """Chance of exactly `count` events in `dice` trials that each happen with `chance`"""
    coefficient = n_choose_k(dice, count)
    try:
        return coefficient * chance ** count * (1.0 - chance) ** (dice - count)
    except OverflowError:
        # Coefficient too large for a float; math.log takes the exact int
        return math.exp(math.log(coefficient)
                        + count * math.log(chance)
                        + (dice - count) * math.log1p(-chance))


# Tail probabilities
def calculate_by_success(dice: int, successes_needed: int, hit_chance: float) -> float:
    """
    Probability of at least `successes_needed` hits, summing the chance of
    exactly j hits for every j from `successes_needed` up to `dice`.
    """
    _check_tail_args(dice, successes_needed)
    result = 0.0

    for hits in range(successes_needed, dice):
        result += _binomial_term(dice, hits, hit_chance)

    # Every die hits; C(n, n) == 1
    result += hit_chance ** dice
    return result


def calculate_by_miss(dice: int, successes_needed: int, hit_chance: float) -> float:
    """
    Probability of at least `successes_needed` hits, computed as one minus the
    chance of rolling more misses than the roll can afford.
    """
    _check_tail_args(dice, successes_needed)
    if successes_needed == 0:
        return 1.0

    miss_chance = 1.0 - hit_chance
    misses_allowed = dice - successes_needed
    result = 0.0

    for misses in range(misses_allowed + 1, dice):
        result += _binomial_term(dice, misses, miss_chance)

    # Every die misses
    result += miss_chance ** dice
    return 1.0 - result


def calculate_success_chance(dice: int, successes_needed: int,
                             status: Union[StatusMode, str] = StatusMode.NORMAL) -> float:
    """Chance of rolling at least `successes_needed` successes on `dice` d6s"""
    if dice < 0:
        raise ValueError(f"Number of dice cannot be negative: {dice}")
    if successes_needed < 0:
        raise ValueError(f"Successes needed cannot be negative: {successes_needed}")

    hit_chance = 1.0 / success_denominator(status)

    # Zero successes are always satisfied, even with no dice
    if successes_needed == 0:
        return 1.0
    if dice == 0 or successes_needed > dice:
        logger.debug("%d successes impossible on %d dice", successes_needed, dice)
        return 0.0

    # Sum whichever side of the distribution has fewer terms
    if successes_needed > dice // 2:
        logger.debug("Summing success counts %d..%d", successes_needed, dice)
        result = calculate_by_success(dice, successes_needed, hit_chance)
    else:
        logger.debug("Summing miss counts %d..%d", dice - successes_needed + 1, dice)
        result = calculate_by_miss(dice, successes_needed, hit_chance)

    return min(1.0, max(0.0, result))


def success_table(dice: int, status: Union[StatusMode, str] = StatusMode.NORMAL) -> List[Tuple[int, float]]:
    """Chance of at least k successes for every k from 0 to `dice`"""
    return [(k, calculate_success_chance(dice, k, status)) for k in range(dice + 1)]


def format_chance(probability: float, precision: Optional[int] = DEFAULT_PRECISION) -> str:
    """Render a probability as a percentage string. precision=None keeps every digit."""
    percent = probability * 100
    if precision is None:
        return f"{percent}%"
    return f"{percent:.{precision}f}%"


@dataclass
class SuccessCheck:
    """A single roll request: how many dice, how many successes, which status"""
    dice: int = 1
    successes_needed: int = 1
    status: StatusMode = StatusMode.NORMAL

    def __post_init__(self):
        self.status = StatusMode.parse(self.status)

    def chance(self) -> float:
        return calculate_success_chance(self.dice, self.successes_needed, self.status)

    def hit_faces(self) -> Tuple[int, ...]:
        return success_faces(self.status)


@dataclass
class RollResult:
    """Result of a dice roll with metadata"""
    dice: np.ndarray
    successes: np.ndarray
    failures: np.ndarray
    num_successes: int
    num_failures: int
    status: StatusMode


class DiceRoller:
    """Rolls d6s and counts successes, used to check the exact odds empirically"""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def roll(self, num_dice, status=StatusMode.NORMAL) -> RollResult:
        """Roll the specified number of d6 dice and sort them into successes and failures"""
        if num_dice < 0:
            raise ValueError(f"Number of dice cannot be negative: {num_dice}")
        status = StatusMode.parse(status)

        dice = self.rng.integers(DICE_MIN, DICE_MAX + 1, size=num_dice)
        success_mask = np.isin(dice, success_faces(status))

        return RollResult(
            dice=dice,
            successes=dice[success_mask],
            failures=dice[~success_mask],
            num_successes=int(np.sum(success_mask)),
            num_failures=int(np.sum(~success_mask)),
            status=status,
        )

    def simulate_success_chance(self, num_dice, successes_needed, status=StatusMode.NORMAL,
                                trials=DEFAULT_SIMULATIONS) -> float:
        """Estimate the chance of at least `successes_needed` successes over many rolls"""
        if trials < 1 or trials > MAX_SIMULATIONS:
            raise ValueError(f"Number of trials must be between 1 and {MAX_SIMULATIONS}, got {trials}")
        if num_dice < 0:
            raise ValueError(f"Number of dice cannot be negative: {num_dice}")
        status = StatusMode.parse(status)

        rolls = self.rng.integers(DICE_MIN, DICE_MAX + 1, size=(trials, num_dice))
        hits = np.isin(rolls, success_faces(status)).sum(axis=1)
        estimate = float(np.mean(hits >= successes_needed))

        logger.debug("Simulated %d rolls of %d dice (%s): %.4f",
                     trials, num_dice, status.value, estimate)
        return estimate
