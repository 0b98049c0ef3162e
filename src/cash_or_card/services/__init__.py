"""Business logic services for the Cash or Card application."""

from .consensus import ConsensusEngine
from .moderation import ModerationGateway
from .ratings import RatingService
from .scoring import BayesianAverageScorer, ConfidenceScorer, WilsonScoreScorer, get_scorer

__all__ = [
    "BayesianAverageScorer",
    "ConfidenceScorer",
    "ConsensusEngine",
    "ModerationGateway",
    "RatingService",
    "WilsonScoreScorer",
    "get_scorer",
]
