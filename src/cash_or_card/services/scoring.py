"""Confidence scoring for crowd-submitted facts.

A scorer maps an (upvotes, downvotes) tally to a trust value in [0, 1].
Scorers are pure: the same tally always yields the same score, and the
consensus engine computes scores server-side only.
"""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

from cash_or_card.core.settings import Settings, settings

__all__ = [
    "ConfidenceScorer",
    "BayesianAverageScorer",
    "WilsonScoreScorer",
    "get_scorer",
]


@runtime_checkable
class ConfidenceScorer(Protocol):
    """Strategy interface for turning a vote tally into a confidence score."""

    def score(self, upvotes: int, downvotes: int) -> float:
        """Return a score in [0, 1] for the given tally."""
        ...


def _check_tally(upvotes: int, downvotes: int) -> None:
    if upvotes < 0 or downvotes < 0:
        raise ValueError("Vote counts must be non-negative")


class BayesianAverageScorer:
    """Posterior mean of the upvote ratio under a Beta prior.

    With the default Beta(1, 1) prior an empty tally scores 0.5, each vote
    moves the score by a shrinking amount, and the score converges to the
    observed upvote ratio as votes accumulate.
    """

    def __init__(self, prior_upvotes: float = 1.0, prior_downvotes: float = 1.0) -> None:
        if prior_upvotes <= 0 or prior_downvotes <= 0:
            raise ValueError("Prior pseudo-counts must be positive")
        self.prior_upvotes = prior_upvotes
        self.prior_downvotes = prior_downvotes

    def score(self, upvotes: int, downvotes: int) -> float:
        _check_tally(upvotes, downvotes)
        total = upvotes + downvotes + self.prior_upvotes + self.prior_downvotes
        return (upvotes + self.prior_upvotes) / total

    def __repr__(self) -> str:
        return (
            f"BayesianAverageScorer(prior_upvotes={self.prior_upvotes}, "
            f"prior_downvotes={self.prior_downvotes})"
        )


class WilsonScoreScorer:
    """Lower bound of the Wilson score interval for the upvote ratio.

    Conservative for small samples: an empty tally scores 0 and a single
    upvote scores well below 1. A tally without upvotes scores exactly 0.
    """

    def __init__(self, z: float = 1.96) -> None:
        if z <= 0:
            raise ValueError("z must be positive")
        self.z = z

    def score(self, upvotes: int, downvotes: int) -> float:
        _check_tally(upvotes, downvotes)
        if upvotes == 0:
            return 0.0
        n = upvotes + downvotes
        z2 = self.z * self.z
        p_hat = upvotes / n
        centre = p_hat + z2 / (2 * n)
        spread = self.z * math.sqrt((p_hat * (1 - p_hat) + z2 / (4 * n)) / n)
        lower = (centre - spread) / (1 + z2 / n)
        return min(1.0, max(0.0, lower))

    def __repr__(self) -> str:
        return f"WilsonScoreScorer(z={self.z})"


def get_scorer(config: Settings | None = None) -> ConfidenceScorer:
    """Build the scorer selected by configuration."""
    config = config or settings
    if config.confidence_scorer == "wilson":
        return WilsonScoreScorer(z=config.wilson_z)
    return BayesianAverageScorer(
        prior_upvotes=config.confidence_prior_upvotes,
        prior_downvotes=config.confidence_prior_downvotes,
    )
