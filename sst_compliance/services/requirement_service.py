"""
Requirement Service — the requirement pipeline from raw records to the grid.

    normalize → classify(today) → dedupe (opt-in) → filter

Every step returns a new list; the raw records and intermediate requirements
can be reused across calls with different criteria.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional

from sst_compliance.config import get_settings
from sst_compliance.models.enums import SourceKind
from sst_compliance.models.schemas import FilterCriteria, Requirement
from sst_compliance.rules.workflow_rules import classify_requirement
from sst_compliance.services.filter_service import filter_requirements
from sst_compliance.services.normalization_service import normalize_batch

logger = logging.getLogger(__name__)


def dedupe_latest_version(requirements: Iterable[Requirement]) -> list[Requirement]:
    """
    Keep one row per logical document (title, subject id, document type).

    Versions are compared as plain strings, so "2" wins over "10". Version
    labels are free text upstream and nothing guarantees they are numeric.
    Ties keep the first row seen; groups keep the position of their first row.
    """
    latest: dict[tuple[str, str, str], Requirement] = {}
    for requirement in requirements:
        key = requirement.dedupe_key
        current = latest.get(key)
        if current is None or requirement.version > current.version:
            latest[key] = requirement
    return list(latest.values())


def classify_all(requirements: Iterable[Requirement], today: date) -> list[Requirement]:
    return [classify_requirement(r, today) for r in requirements]


class RequirementService:
    """Builds the unified requirement list for one "today"."""

    def __init__(self, clock: Optional[Callable[[], date]] = None):
        # The clock is only read once per build, never inside the rules.
        self._clock = clock or date.today

    def build(
        self,
        contractor_records: Iterable[Mapping[str, Any]] = (),
        organizational_records: Iterable[Mapping[str, Any]] = (),
        criteria: Optional[FilterCriteria] = None,
        dedupe: Optional[bool] = None,
        organization_names: Optional[Mapping[str, str]] = None,
        today: Optional[date] = None,
    ) -> list[Requirement]:
        today = today or self._clock()
        if dedupe is None:
            dedupe = get_settings().dedupe_latest_version

        requirements = normalize_batch(contractor_records, SourceKind.CONTRACTOR)
        requirements += normalize_batch(
            organizational_records, SourceKind.ORGANIZATIONAL, organization_names
        )
        requirements = classify_all(requirements, today)

        if dedupe:
            before = len(requirements)
            requirements = dedupe_latest_version(requirements)
            logger.debug(f"Deduplicated {before} → {len(requirements)} requirements")

        if criteria is not None:
            requirements = filter_requirements(requirements, criteria)

        logger.info(
            f"Built {len(requirements)} requirements for {today.isoformat()} "
            f"(dedupe={'on' if dedupe else 'off'})"
        )
        return requirements
