"""Registry engine — npm registry client and settle-all batch lookups."""

from depcheck.engines.registry.batch import Outcome, lookup_all, settle_all
from depcheck.engines.registry.cache import CacheStats, TTLCache
from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.engines.registry.models import RegistryLookupResult

__all__ = [
    "CacheStats",
    "NpmRegistryClient",
    "Outcome",
    "RegistryLookupResult",
    "TTLCache",
    "lookup_all",
    "settle_all",
]
