"""
Rules — the fixed classification tables and functions.

    from sst_compliance.rules import classify_requirement
"""

from .category_rules import categorize
from .vigency_rules import classify_vigency, compute_days_remaining
from .workflow_rules import classify_requirement, map_workflow_status

__all__ = [
    "categorize",
    "classify_vigency",
    "compute_days_remaining",
    "classify_requirement",
    "map_workflow_status",
]
