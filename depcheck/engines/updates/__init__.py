"""Update engine — classify version deltas and recommend updates."""

from depcheck.engines.updates.classifier import classify_update
from depcheck.engines.updates.models import Recommendation, UpdateCandidate
from depcheck.engines.updates.recommender import find_update_candidates, recommend_updates

__all__ = [
    "Recommendation",
    "UpdateCandidate",
    "classify_update",
    "find_update_candidates",
    "recommend_updates",
]
