"""Settle-all fan-out — run independent lookups and capture each outcome."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from depcheck.engines.registry.client import NpmRegistryClient
from depcheck.engines.registry.models import RegistryLookupResult

log = structlog.get_logger("depcheck.engine")

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class Outcome(Generic[R]):
    """Result of one task in a batch: a value or the exception it raised."""

    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    *,
    limit: int | None = None,
) -> list[Outcome[R]]:
    """Run ``fn(item)`` for every item and wait for all of them.

    Returns one :class:`Outcome` per item, in input order. A failing task
    never cancels its siblings. *limit* caps the number of tasks in flight.
    """
    sem = asyncio.Semaphore(limit) if limit else None

    async def _run_one(item: T) -> Outcome[R]:
        try:
            if sem is None:
                return Outcome(value=await fn(item))
            async with sem:
                return Outcome(value=await fn(item))
        except Exception as exc:
            return Outcome(error=exc)

    return list(await asyncio.gather(*(_run_one(item) for item in items)))


async def lookup_all(
    client: NpmRegistryClient,
    package_names: Sequence[str],
) -> list[RegistryLookupResult]:
    """Look up every package; failures become results without a latest version."""
    outcomes = await settle_all(package_names, client.lookup)

    results: list[RegistryLookupResult] = []
    for name, outcome in zip(package_names, outcomes):
        if outcome.ok and outcome.value is not None:
            if not outcome.value.ok:
                log.warning("registry.lookup_failed", package=name, error=outcome.value.error)
            results.append(outcome.value)
            continue
        log.warning("registry.lookup_failed", package=name, error=str(outcome.error))
        results.append(RegistryLookupResult(package_name=name, error=str(outcome.error)))
    return results
