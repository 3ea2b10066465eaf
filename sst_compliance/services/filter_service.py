"""
Filter Service — faceted queries over the requirement set.

Every predicate in FilterCriteria is independent and all of them are ANDed.
An unset criterion passes everything; a set one never matches a requirement
whose facet is None. Filtering is a single O(n) pass with no indexes.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from sst_compliance.errors import InvalidFilterCriteria
from sst_compliance.models.enums import SubjectBucket, SubjectKind, VigencyState
from sst_compliance.models.schemas import FilterCriteria, Requirement

logger = logging.getLogger(__name__)

_EXACT_FACETS = (
    "scope_id",
    "workflow_status",
    "category",
    "document_type",
    "site",
    "uploaded_by",
    "approved_by",
)
_CONTAINS_FACETS = ("process", "sub_process", "title")

_BUCKET_KIND = {
    SubjectBucket.ORGANIZATION: SubjectKind.ORGANIZATION,
    SubjectBucket.CONTRACTOR: SubjectKind.CONTRACTOR,
}


def parse_filter_criteria(raw: Optional[Mapping[str, Any]]) -> FilterCriteria:
    """Build criteria from loose input (e.g. query params). Raises InvalidFilterCriteria."""
    if raw is None:
        return FilterCriteria()
    if not isinstance(raw, Mapping):
        raise InvalidFilterCriteria(f"Filter criteria must be a mapping, got {type(raw).__name__}")
    try:
        return FilterCriteria.model_validate(dict(raw))
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'criteria'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidFilterCriteria(details) from exc


def matches(requirement: Requirement, criteria: FilterCriteria) -> bool:
    for facet in _EXACT_FACETS:
        expected = getattr(criteria, facet)
        if expected is not None and getattr(requirement, facet) != expected:
            return False

    for facet in _CONTAINS_FACETS:
        needle = getattr(criteria, facet)
        if needle is None:
            continue
        value = getattr(requirement, facet)
        if value is None or needle.lower() not in value.lower():
            return False

    bucket = criteria.subject_bucket
    if bucket is not None and bucket != SubjectBucket.ALL:
        if requirement.subject.kind != _BUCKET_KIND[bucket]:
            return False

    if criteria.vigency_states and requirement.vigency_state not in criteria.vigency_states:
        return False

    return True


def filter_requirements(
    requirements: Iterable[Requirement],
    *criteria: FilterCriteria,
) -> list[Requirement]:
    """
    Keep the requirements that satisfy every criteria object given.
    Passing several criteria is the same as filtering with each in turn.
    """
    active = [c for c in criteria if not c.is_empty]
    result = [r for r in requirements if all(matches(r, c) for c in active)]
    logger.debug(f"Filtered to {len(result)} requirements with {len(active)} active criteria")
    return result


# ── Dashboard helpers ────────────────────────────────────


def facet_options(requirements: Iterable[Requirement]) -> dict[str, list[str]]:
    """Sorted distinct values for the free-choice filter drop-downs."""
    document_types: set[str] = set()
    sites: set[str] = set()
    processes: set[str] = set()
    uploaders: set[str] = set()
    for r in requirements:
        document_types.add(r.document_type)
        if r.site:
            sites.add(r.site)
        if r.process:
            processes.add(r.process)
        if r.uploaded_by:
            uploaders.add(r.uploaded_by)
    return {
        "document_types": sorted(document_types),
        "sites": sorted(sites),
        "processes": sorted(processes),
        "uploaded_by": sorted(uploaders),
    }


def count_by_vigency(requirements: Iterable[Requirement]) -> dict[VigencyState, int]:
    """Legend counts; every state is present, zero when unused."""
    counts = Counter(r.vigency_state for r in requirements)
    return {state: counts.get(state, 0) for state in VigencyState}
