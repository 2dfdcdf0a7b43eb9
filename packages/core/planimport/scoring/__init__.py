"""Identifier scoring strategies."""

from planimport.scoring.strategies import LOCATION_ATTRIBUTES, ScoredCandidate, ScoringStrategy, rank, select_strategy

__all__ = ["LOCATION_ATTRIBUTES", "ScoredCandidate", "ScoringStrategy", "rank", "select_strategy"]
