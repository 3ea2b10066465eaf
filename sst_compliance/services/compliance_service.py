"""
Compliance Service — annual training compliance per worker.

Merges the per-scope training snapshots for one calendar year into worker
records, then splits them into "meets" / "does not meet" for a threshold.
The split is recomputed on every call so a threshold change can never be
answered from a stale result.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from sst_compliance.config import get_settings
from sst_compliance.models.schemas import (
    AnnualComplianceReport,
    CompliancePartition,
    ScopeResult,
    ScopeTrainingSnapshot,
    TrainingSummary,
    WorkerComplianceRecord,
    WorkerTrainingHistory,
)

logger = logging.getLogger(__name__)


def build_worker_record(
    history: WorkerTrainingHistory,
    year: int,
    scope_id: str = "",
) -> WorkerComplianceRecord:
    """Count the distinct certified trainings a worker completed in the year."""
    seen: set[tuple] = set()
    trainings: list[TrainingSummary] = []
    for event in history.events:
        if not event.has_certificate or event.completion_date.year != year:
            continue
        key = (event.title, event.completion_date, event.type)
        if key in seen:
            continue
        seen.add(key)
        trainings.append(
            TrainingSummary(title=event.title, date=event.completion_date, type=event.type)
        )

    trainings.sort(key=lambda t: t.date)
    return WorkerComplianceRecord(
        worker_id=history.worker_id,
        name=history.name,
        document_number=history.document_number,
        area=history.area,
        scope_id=scope_id,
        certificate_count=len(trainings),
        trainings=trainings,
    )


def aggregate_annual_compliance(
    scope_results: Iterable[ScopeResult],
    year: int,
) -> AnnualComplianceReport:
    """
    Fold per-scope results into one report.
    Failed scopes contribute nothing; their ids are listed on the report.
    Workers keep scope order, then the order the collaborator returned them.
    """
    report = AnnualComplianceReport(year=year)
    for result in scope_results:
        if not result.ok or result.data is None:
            report.failed_scope_ids.append(result.scope_id)
            continue

        snapshot: ScopeTrainingSnapshot = result.data
        report.total_active_workers += snapshot.total_active_workers
        report.workers.extend(
            build_worker_record(worker, year, scope_id=snapshot.scope_id)
            for worker in snapshot.workers
        )

    logger.info(
        f"Training compliance {year}: {len(report.workers)} workers, "
        f"{report.total_active_workers} active"
        + (f", failed scopes: {report.failed_scope_ids}" if report.failed_scope_ids else "")
    )
    return report


def partition_by_threshold(
    report: AnnualComplianceReport,
    threshold: Optional[int] = None,
) -> CompliancePartition:
    """Split workers by certificate_count >= threshold (configured default if None)."""
    if threshold is None:
        threshold = get_settings().default_certificate_threshold
    if threshold < 0:
        raise ValueError(f"Threshold must be >= 0, got {threshold}")

    meets: list[WorkerComplianceRecord] = []
    does_not_meet: list[WorkerComplianceRecord] = []
    for worker in report.workers:
        if worker.certificate_count >= threshold:
            meets.append(worker)
        else:
            does_not_meet.append(worker)

    total = len(report.workers)
    percentage = round(100 * len(meets) / total) if total else 0
    return CompliancePartition(
        threshold=threshold,
        meets=meets,
        does_not_meet=does_not_meet,
        compliance_percentage=percentage,
    )
