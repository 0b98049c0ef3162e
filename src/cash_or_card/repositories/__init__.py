"""Persistence helpers for facts and the vote ledger."""

from .fact_repo import FactRepository
from .vote_repo import Tally, VoteLedger

__all__ = ["FactRepository", "Tally", "VoteLedger"]
