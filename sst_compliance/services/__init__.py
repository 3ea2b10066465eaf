"""Services — normalization, requirement pipeline, filtering, training compliance."""

from sst_compliance.services.normalization_service import (
    flatten_contractors,
    normalize_batch,
    normalize_record,
)
from sst_compliance.services.requirement_service import (
    RequirementService,
    dedupe_latest_version,
)
from sst_compliance.services.filter_service import (
    count_by_vigency,
    facet_options,
    filter_requirements,
    parse_filter_criteria,
)
from sst_compliance.services.compliance_service import (
    aggregate_annual_compliance,
    partition_by_threshold,
)

__all__ = [
    "flatten_contractors",
    "normalize_batch",
    "normalize_record",
    "RequirementService",
    "dedupe_latest_version",
    "count_by_vigency",
    "facet_options",
    "filter_requirements",
    "parse_filter_criteria",
    "aggregate_annual_compliance",
    "partition_by_threshold",
]
