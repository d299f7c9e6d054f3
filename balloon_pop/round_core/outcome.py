"""
Outcome Classifier
==================

Maps a final score to a rating tier and decides whether the player may
continue. Tier boundaries and the pass threshold are fixed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Score needed to unlock the continue action
PASS_THRESHOLD = 200


@dataclass(frozen=True)
class RatingTier:
    """One row of the rating table."""
    tier: int
    min_score: int
    label: str
    crown: bool


# Highest first; the first tier whose minimum is met wins
RATING_TIERS: Tuple[RatingTier, ...] = (
    RatingTier(1, 500, "Royal Master!", True),
    RatingTier(2, 300, "Balloon Champion!", False),
    RatingTier(3, 200, "Great Popper!", False),
    RatingTier(4, 100, "Good Job!", False),
    RatingTier(5, 0, "Keep Practicing!", False),
)

PASS_MESSAGE = (
    "Outstanding performance! You've shown royal reflexes and earned "
    "your place in the celebration!"
)
RETRY_MESSAGE = (
    "Good effort! Every balloon popped was a moment of joy. "
    "Try again to improve your royal skills!"
)


@dataclass(frozen=True)
class Outcome:
    """Classification of a finished round."""
    score: int
    rating: RatingTier
    can_continue: bool

    @property
    def tier(self) -> int:
        return self.rating.tier

    @property
    def label(self) -> str:
        return self.rating.label

    @property
    def action(self) -> str:
        """The action offered on the outcome screen."""
        return "continue" if self.can_continue else "retry"

    @property
    def message(self) -> str:
        return PASS_MESSAGE if self.can_continue else RETRY_MESSAGE


def rate_score(score: int) -> RatingTier:
    """Look up the rating tier for a score."""
    for rating in RATING_TIERS:
        if score >= rating.min_score:
            return rating
    return RATING_TIERS[-1]


def classify_outcome(score: int) -> Outcome:
    """
    Classify a final score.

    Args:
        score: Final round score.

    Returns:
        Outcome with tier, label and the continue/retry decision.
    """
    return Outcome(
        score=score,
        rating=rate_score(score),
        can_continue=score >= PASS_THRESHOLD
    )
