"""
Source collection — concurrent fan-out over the fetch collaborators.

The collaborators (REST clients, in the dashboard) are injected as async
callables. Sources never depend on each other, so they are all awaited
together. A failing fetch becomes a failed ScopeResult; it never cancels or
invalidates the others and nothing is raised to the caller. Timeouts and
retries belong to the collaborators.
"""

from __future__ import annotations

import asyncio
import logging
from collections import abc
from datetime import date
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel, ValidationError

from sst_compliance.errors import SourceFetchError
from sst_compliance.models.schemas import (
    AnnualComplianceReport,
    FilterCriteria,
    OrgFilters,
    Requirement,
    ScopeResult,
    ScopeTrainingSnapshot,
    TrainingEvent,
    WorkerTrainingHistory,
)
from sst_compliance.services.compliance_service import aggregate_annual_compliance
from sst_compliance.services.normalization_service import flatten_contractors
from sst_compliance.services.requirement_service import RequirementService

logger = logging.getLogger(__name__)

RecordFetcher = Callable[[Optional[str]], Awaitable[Iterable[Mapping[str, Any]]]]
TrainingScopeFetcher = Callable[[str, int, OrgFilters], Awaitable[Any]]

CONTRACTOR_SOURCE = "contractor_documents"
ORGANIZATIONAL_SOURCE = "organizational_documents"


class RequirementSources(BaseModel):
    """Raw records from both requirement sources, one ScopeResult each."""
    contractor: ScopeResult
    organizational: ScopeResult

    @property
    def contractor_records(self) -> list[Mapping[str, Any]]:
        return list(self.contractor.data or []) if self.contractor.ok else []

    @property
    def organizational_records(self) -> list[Mapping[str, Any]]:
        return list(self.organizational.data or []) if self.organizational.ok else []


async def _guarded(
    scope_id: str,
    source: str,
    fetch: Callable[..., Awaitable[Any]],
    *args: Any,
) -> ScopeResult:
    try:
        data = await fetch(*args)
    except Exception as exc:
        error = SourceFetchError(f"{source} fetch failed for '{scope_id}': {exc}", source=source)
        logger.warning(str(error))
        return ScopeResult.failed(scope_id, str(error))
    return ScopeResult.success(scope_id, data)


def _as_records(result: ScopeResult, source: str) -> ScopeResult:
    """Materialize a record source; anything but a list of records fails it."""
    if not result.ok or result.data is None:
        return result
    data = result.data
    if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, abc.Iterable):
        error = SourceFetchError(
            f"Unexpected {source} payload for '{result.scope_id}': {type(data).__name__}",
            source=source,
        )
        logger.warning(str(error))
        return ScopeResult.failed(result.scope_id, str(error))
    return ScopeResult.success(result.scope_id, list(data))


async def collect_requirement_sources(
    fetch_contractor_documents: RecordFetcher,
    fetch_organizational_documents: RecordFetcher,
    scope_id: Optional[str] = None,
) -> RequirementSources:
    """Fetch both requirement sources concurrently."""
    key = scope_id or "*"
    contractor, organizational = await asyncio.gather(
        _guarded(key, CONTRACTOR_SOURCE, fetch_contractor_documents, scope_id),
        _guarded(key, ORGANIZATIONAL_SOURCE, fetch_organizational_documents, scope_id),
    )
    return RequirementSources(
        contractor=_as_records(contractor, CONTRACTOR_SOURCE),
        organizational=_as_records(organizational, ORGANIZATIONAL_SOURCE),
    )



async def load_requirements(
    fetch_contractor_documents: RecordFetcher,
    fetch_organizational_documents: RecordFetcher,
    scope_id: Optional[str] = None,
    criteria: Optional[FilterCriteria] = None,
    dedupe: Optional[bool] = None,
    organization_names: Optional[Mapping[str, str]] = None,
    today: Optional[date] = None,
    nested_contractors: bool = False,
    service: Optional[RequirementService] = None,
) -> list[Requirement]:
    """
    Fetch, then run the requirement pipeline. A failed source simply shows
    up as no rows for that source.
    """
    sources = await collect_requirement_sources(
        fetch_contractor_documents, fetch_organizational_documents, scope_id
    )
    contractor_records = sources.contractor_records
    if nested_contractors:
        contractor_records = flatten_contractors(contractor_records)

    service = service or RequirementService()
    return service.build(
        contractor_records=contractor_records,
        organizational_records=sources.organizational_records,
        criteria=criteria,
        dedupe=dedupe,
        organization_names=organization_names,
        today=today,
    )


# ── Training compliance ──────────────────────────────────


def _parse_worker(scope_id: str, raw_worker: Any) -> Optional[WorkerTrainingHistory]:
    """Validate one worker, dropping its invalid training events one by one."""
    if not isinstance(raw_worker, Mapping):
        logger.warning(f"Dropped worker entry of type {type(raw_worker).__name__} in scope '{scope_id}'")
        return None
    worker_id = raw_worker.get("worker_id")

    raw_events = raw_worker.get("events") or []
    if not isinstance(raw_events, (list, tuple)):
        logger.warning(f"Worker {worker_id or '<no id>'} in scope '{scope_id}': events is not a list, ignoring")
        raw_events = []

    events: list[TrainingEvent] = []
    for raw_event in raw_events:
        try:
            events.append(TrainingEvent.model_validate(raw_event))
        except ValidationError as exc:
            logger.warning(
                f"Dropped training event of worker {worker_id or '<no id>'} in scope '{scope_id}': "
                f"{exc.error_count()} invalid fields"
            )

    try:
        return WorkerTrainingHistory.model_validate({**raw_worker, "events": events})
    except ValidationError as exc:
        logger.warning(
            f"Dropped worker {worker_id or '<no id>'} in scope '{scope_id}': "
            f"{exc.error_count()} invalid fields"
        )
        return None


def _parse_snapshot(scope_id: str, data: Any) -> ScopeTrainingSnapshot:
    """Validate a scope payload worker by worker, dropping invalid workers."""
    if isinstance(data, ScopeTrainingSnapshot):
        return data
    if not isinstance(data, Mapping):
        raise SourceFetchError(
            f"Unexpected training payload for '{scope_id}': {type(data).__name__}",
            source="trainings",
        )

    raw_workers = data.get("workers") or []
    if not isinstance(raw_workers, (list, tuple)):
        raise SourceFetchError(
            f"Unexpected workers payload for '{scope_id}': {type(raw_workers).__name__}",
            source="trainings",
        )

    workers: list[WorkerTrainingHistory] = []
    for raw_worker in raw_workers:
        worker = _parse_worker(scope_id, raw_worker)
        if worker is not None:
            workers.append(worker)

    try:
        return ScopeTrainingSnapshot(
            scope_id=data.get("scope_id") or scope_id,
            total_active_workers=data.get("total_active_workers") or 0,
            workers=workers,
        )
    except ValidationError as exc:
        raise SourceFetchError(
            f"Invalid training payload for '{scope_id}': {exc.error_count()} invalid fields",
            source="trainings",
        ) from exc


async def _fetch_scope(
    fetch_scope: TrainingScopeFetcher,
    scope_id: str,
    year: int,
    facets: OrgFilters,
) -> ScopeResult:
    result = await _guarded(scope_id, "trainings", fetch_scope, scope_id, year, facets)
    if not result.ok:
        return result
    try:
        return ScopeResult.success(scope_id, _parse_snapshot(scope_id, result.data))
    except SourceFetchError as exc:
        logger.warning(str(exc))
        return ScopeResult.failed(scope_id, str(exc))


async def collect_annual_compliance(
    fetch_scope: TrainingScopeFetcher,
    scope_ids: Sequence[str],
    year: int,
    facets: Optional[OrgFilters] = None,
) -> AnnualComplianceReport:
    """
    Fetch every scope's workers and certified trainings concurrently and merge
    them. Partition the report with partition_by_threshold().
    """
    facets = facets or OrgFilters()
    results = await asyncio.gather(
        *(_fetch_scope(fetch_scope, scope_id, year, facets) for scope_id in scope_ids)
    )
    return aggregate_annual_compliance(results, year)
