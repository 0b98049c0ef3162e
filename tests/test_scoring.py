"""Tests for the confidence scorers."""

import pytest

from cash_or_card.core.settings import Settings
from cash_or_card.services.scoring import (
    BayesianAverageScorer,
    ConfidenceScorer,
    WilsonScoreScorer,
    get_scorer,
)

SCORERS = [BayesianAverageScorer(), WilsonScoreScorer()]


def test_bayesian_baseline_is_neutral() -> None:
    """An empty tally scores 0.5 under the default Beta(1, 1) prior."""
    assert BayesianAverageScorer().score(0, 0) == pytest.approx(0.5)


def test_bayesian_single_upvote() -> None:
    assert BayesianAverageScorer().score(1, 0) == pytest.approx(2 / 3)
    assert BayesianAverageScorer().score(1, 1) == pytest.approx(0.5)


def test_bayesian_custom_prior() -> None:
    scorer = BayesianAverageScorer(prior_upvotes=2, prior_downvotes=8)
    assert scorer.score(0, 0) == pytest.approx(0.2)
    assert scorer.score(10, 0) == pytest.approx(0.6)


def test_wilson_baseline_is_zero() -> None:
    assert WilsonScoreScorer().score(0, 0) == 0.0


def test_wilson_single_upvote() -> None:
    """One upvote gives the lower bound 1 / (1 + z^2)."""
    z = 1.96
    assert WilsonScoreScorer(z=z).score(1, 0) == pytest.approx(1 / (1 + z * z))


def test_wilson_converges_toward_ratio() -> None:
    scorer = WilsonScoreScorer()
    assert scorer.score(900, 100) == pytest.approx(0.88, abs=0.01)
    assert scorer.score(900, 100) < 0.9


@pytest.mark.parametrize("scorer", SCORERS, ids=repr)
def test_scores_are_bounded(scorer: ConfidenceScorer) -> None:
    for upvotes in range(0, 30):
        for downvotes in range(0, 30):
            assert 0.0 <= scorer.score(upvotes, downvotes) <= 1.0


@pytest.mark.parametrize("scorer", SCORERS, ids=repr)
def test_more_upvotes_never_lower_the_score(scorer: ConfidenceScorer) -> None:
    for upvotes in range(0, 25):
        for downvotes in range(0, 25):
            assert scorer.score(upvotes + 1, downvotes) >= scorer.score(upvotes, downvotes)


@pytest.mark.parametrize("scorer", SCORERS, ids=repr)
def test_more_downvotes_never_raise_the_score(scorer: ConfidenceScorer) -> None:
    for upvotes in range(0, 25):
        for downvotes in range(0, 25):
            assert scorer.score(upvotes, downvotes + 1) <= scorer.score(upvotes, downvotes)


@pytest.mark.parametrize("scorer", SCORERS, ids=repr)
def test_scoring_is_deterministic(scorer: ConfidenceScorer) -> None:
    assert scorer.score(7, 3) == scorer.score(7, 3)


@pytest.mark.parametrize("scorer", SCORERS, ids=repr)
def test_negative_counts_rejected(scorer: ConfidenceScorer) -> None:
    with pytest.raises(ValueError):
        scorer.score(-1, 0)
    with pytest.raises(ValueError):
        scorer.score(0, -1)


def test_invalid_parameters_rejected() -> None:
    with pytest.raises(ValueError):
        BayesianAverageScorer(prior_upvotes=0)
    with pytest.raises(ValueError):
        WilsonScoreScorer(z=0)


def test_scorers_satisfy_protocol() -> None:
    for scorer in SCORERS:
        assert isinstance(scorer, ConfidenceScorer)


def test_get_scorer_defaults_to_bayesian() -> None:
    scorer = get_scorer(
        Settings(
            CONFIDENCE_SCORER="bayesian",
            CONFIDENCE_PRIOR_UPVOTES=3,
            CONFIDENCE_PRIOR_DOWNVOTES=1,
        )
    )
    assert isinstance(scorer, BayesianAverageScorer)
    assert scorer.score(0, 0) == pytest.approx(0.75)


def test_get_scorer_selects_wilson() -> None:
    scorer = get_scorer(Settings(CONFIDENCE_SCORER="wilson", WILSON_Z=1.0))
    assert isinstance(scorer, WilsonScoreScorer)
    assert scorer.z == 1.0


def test_wilson_without_upvotes_is_exactly_zero() -> None:
    """Downvote-only tallies never drift above zero from rounding."""
    scorer = WilsonScoreScorer()
    for downvotes in range(0, 500):
        assert scorer.score(0, downvotes) == 0.0


def test_wilson_downvotes_monotonic_over_long_run() -> None:
    scorer = WilsonScoreScorer()
    for upvotes in (0, 1, 2, 5):
        previous = scorer.score(upvotes, 0)
        for downvotes in range(1, 300):
            current = scorer.score(upvotes, downvotes)
            assert current <= previous
            previous = current
