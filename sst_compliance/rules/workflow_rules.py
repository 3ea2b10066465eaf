"""
Workflow Rules — coarse approval-lifecycle label for a requirement.

Only classifies what the data already says; it never moves a requirement
through the workflow. OBSERVADO has no data source yet and is never returned.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sst_compliance.models.enums import DocumentStatus, SourceKind, WorkflowStatus
from sst_compliance.models.schemas import Requirement
from sst_compliance.rules.vigency_rules import classify_vigency, compute_days_remaining


def map_workflow_status(
    authoritative_status: Optional[DocumentStatus],
    days_remaining: Optional[int],
) -> Optional[WorkflowStatus]:
    """First match wins."""
    if authoritative_status == DocumentStatus.PENDING:
        return WorkflowStatus.PENDING
    if authoritative_status == DocumentStatus.EXPIRED or (
        days_remaining is not None and days_remaining < 0
    ):
        return WorkflowStatus.OVERDUE
    if authoritative_status == DocumentStatus.ABOUT_TO_EXPIRE:
        return WorkflowStatus.AWAITING_APPROVAL
    if authoritative_status == DocumentStatus.VALID:
        return WorkflowStatus.APPROVED
    return None


def classify_requirement(requirement: Requirement, today: date) -> Requirement:
    """
    Recompute every derived field of a requirement for the given day.
    Returns a new Requirement; the input is left untouched.
    """
    days = compute_days_remaining(requirement.expiration_date, today)
    vigency = classify_vigency(
        requirement.expiration_date, requirement.authoritative_status, today
    )

    if requirement.source_kind == SourceKind.ORGANIZATIONAL:
        # An active organizational document is approved by definition
        workflow = WorkflowStatus.APPROVED
    else:
        workflow = map_workflow_status(requirement.authoritative_status, days)

    return requirement.model_copy(
        update={
            "days_remaining": days,
            "vigency_state": vigency,
            "workflow_status": workflow,
        }
    )
